from abc import ABC, abstractmethod
from typing import Iterator
from .block_window import BlockWindow

# -------------------------
# Generate windows in order
# Unaware of execution results
# No retry
# -------------------------
class BaseRangePlanner(ABC):
    @abstractmethod
    def windows(self) -> Iterator[BlockWindow]:
        pass

    def __iter__(self) -> Iterator[BlockWindow]:
        # every iteration starts a fresh cursor
        return self.windows()

    def block_numbers(self) -> Iterator[int]:
        for window in self.windows():
            yield from window.blocks


class StridedRangePlanner(BaseRangePlanner):
    """
    Ascending backfill planner
    - fixed-width windows starting at start_block
    - a window is opened while its first block <= end_block
    - the last window keeps its full width and may run past end_block
    """
    def __init__(
        self,
        start_block: int,
        end_block: int,
        stride: int = 5,
    ):
        if start_block < 0 or end_block < 0:
            raise ValueError(
                f"block bounds must be non-negative, got {start_block}..{end_block}"
            )
        if start_block > end_block:
            raise ValueError(
                f"start_block {start_block} > end_block {end_block}"
            )
        if stride < 1:
            raise ValueError(f"stride must be >= 1, got {stride}")

        self.start_block = start_block
        self.end_block = end_block
        self.stride = stride

    def windows(self) -> Iterator[BlockWindow]:
        window_id = 0
        for start in range(self.start_block, self.end_block + 1, self.stride):
            yield BlockWindow(
                window_id=window_id,
                blocks=tuple(range(start, start + self.stride)),
            )
            window_id += 1


class DescendingRangePlanner(BaseRangePlanner):
    """
    Look-back planner
    - one window: block_number-1 down to block_number-count
    - count == 0 plans nothing
    """
    def __init__(self, block_number: int, count: int):
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        if count > block_number:
            raise ValueError(
                f"cannot look back {count} blocks from block {block_number}"
            )

        self.block_number = block_number
        self.count = count

    def windows(self) -> Iterator[BlockWindow]:
        if self.count == 0:
            return
        yield BlockWindow(
            window_id=0,
            blocks=tuple(
                self.block_number - i for i in range(1, self.count + 1)
            ),
        )
