# planning
from eth_ingestion.planning import (
    BlockWindow,
    BaseRangePlanner,
    StridedRangePlanner,
    DescendingRangePlanner,
)

# execution
from eth_ingestion.execution import (
    BatchResult,
    BatchFetchError,
    BatchFetcher,
    FileAppender,
    serialize_record,
)

# engine
from eth_ingestion.ingestion import FetchPipeline, PipelineSummary

__all__ = [
    # planning
    "BlockWindow",
    "BaseRangePlanner",
    "StridedRangePlanner",
    "DescendingRangePlanner",

    # execution
    "BatchResult",
    "BatchFetchError",
    "BatchFetcher",
    "FileAppender",
    "serialize_record",

    # engine
    "FetchPipeline",
    "PipelineSummary",
]
