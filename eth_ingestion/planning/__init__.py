from .block_window import BlockWindow
from .range_planner import (
    BaseRangePlanner,
    StridedRangePlanner,
    DescendingRangePlanner,
)

__all__ = [
    "BlockWindow",
    "BaseRangePlanner",
    "StridedRangePlanner",
    "DescendingRangePlanner",
]
