from .batch_result import BatchResult, BatchFetchError
from .batch_fetcher import BatchFetcher
from .appender import FileAppender, serialize_record

__all__ = [
    "BatchResult",
    "BatchFetchError",
    "BatchFetcher",
    "FileAppender",
    "serialize_record",
]
