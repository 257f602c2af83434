from dataclasses import dataclass
from typing import Any, Callable
from ..logging import log
from ..metrics import WINDOWS_COMMITTED, RECORDS_APPENDED
from ..planning import BaseRangePlanner, BlockWindow
from ..execution import BatchFetcher, FileAppender


@dataclass
class PipelineSummary:
    windows: int = 0
    records: int = 0


class FetchPipeline:
    """
    planner → fetcher → appender, one window at a time.

    A window is appended only after every fetch in it succeeded. The next
    window is not fetched before the previous one is on disk.
    """

    def __init__(
        self,
        *,
        planner: BaseRangePlanner,
        fetcher: BatchFetcher,
        appender: FileAppender,
        job_name: str,
        transform: Callable[[Any], Any] | None = None,
        on_window: Callable[[BlockWindow, tuple], None] | None = None,
    ):
        self.planner = planner
        self.fetcher = fetcher
        self.appender = appender
        self.job_name = job_name
        self.transform = transform
        self.on_window = on_window

    async def run(self) -> PipelineSummary:
        summary = PipelineSummary()

        log.info(
            "pipeline_start",
            extra={
                "job": self.job_name,
                "planner": type(self.planner).__name__,
                "path": self.appender.path,
            },
        )

        for window in self.planner:
            batch = await self.fetcher.fetch(window)

            if not batch.ok:
                log.error(
                    "window_failed",
                    extra={
                        "job": self.job_name,
                        "window_id": window.window_id,
                        "block": batch.failed_block,
                        "committed_windows": summary.windows,
                    },
                )
            # raises BatchFetchError on failure
            results = batch.unwrap()

            if self.transform is not None:
                results = tuple(self.transform(r) for r in results)

            count = self.appender.append_all(results)

            summary.windows += 1
            summary.records += count
            WINDOWS_COMMITTED.labels(job=self.job_name).inc()
            RECORDS_APPENDED.labels(job=self.job_name).inc(count)

            log.info(
                "window_committed",
                extra={
                    "job": self.job_name,
                    "window_id": window.window_id,
                    "first_block": window.first_block,
                    "last_block": window.last_block,
                    "records": count,
                },
            )

            if self.on_window is not None:
                self.on_window(window, results)

        log.info(
            "pipeline_finished",
            extra={
                "job": self.job_name,
                "windows": summary.windows,
                "records": summary.records,
            },
        )
        return summary
