from dataclasses import dataclass
from typing import Any
from ..planning import BlockWindow


class BatchFetchError(RuntimeError):
    def __init__(self, window: BlockWindow, block_number: int, cause: BaseException):
        super().__init__(
            f"window {window.window_id} failed at block {block_number}: "
            f"{type(cause).__name__}: {cause}"
        )
        self.window = window
        self.block_number = block_number
        self.cause = cause


# Outcome of one window: every result in request order, or the first failure
@dataclass(frozen=True)
class BatchResult:
    window: BlockWindow
    results: tuple[Any, ...] = ()
    failed_block: int | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, window: BlockWindow, results) -> "BatchResult":
        return cls(window=window, results=tuple(results))

    @classmethod
    def failure(cls, window: BlockWindow, block_number: int, error: BaseException) -> "BatchResult":
        return cls(window=window, failed_block=block_number, error=error)

    def unwrap(self) -> tuple[Any, ...]:
        if self.error is not None:
            raise BatchFetchError(self.window, self.failed_block, self.error) from self.error
        return self.results
