import os
import sys
import asyncio
from ..config import RpcConfig, ConfigError, metrics_port
from ..execution import BatchFetcher, FileAppender
from ..ingestion import FetchPipeline
from ..logging import log
from ..metrics import start_metrics_server
from ..planning import DescendingRangePlanner
from ..rpc_provider import AsyncRpcClient, ChainBlockSource, open_rpc_session

JOB_NAME = "last_hashes"

# -----------------------------
# Defaults (overridable via environment)
# -----------------------------
BEGIN_BLOCK = int(os.getenv("BEGIN_BLOCK", "7840001"))
HASH_COUNT = int(os.getenv("HASH_COUNT", "256"))
LAST_HASHES_PATH = os.getenv("LAST_HASHES_PATH", f"res/lastHashes{BEGIN_BLOCK}")


async def run_last_hashes(
    *,
    source,
    begin_block: int,
    count: int,
    path: str,
) -> list[str]:
    """
    Fetch hashes of begin_block-1 .. begin_block-count in one concurrent
    window and append them most recent first.

    `source` is anything with an async get_block_hash(block_number).
    Returns the collected hashes in file order.
    """
    collected: list[str] = []

    pipeline = FetchPipeline(
        planner=DescendingRangePlanner(begin_block, count),
        fetcher=BatchFetcher(source.get_block_hash, source="rpc"),
        appender=FileAppender(path, ensure_directory=True),
        job_name=JOB_NAME,
        on_window=lambda window, results: collected.extend(results),
    )
    await pipeline.run()
    return collected


async def _run(config: RpcConfig) -> list[str]:
    async with open_rpc_session(config) as session:
        source = ChainBlockSource(
            AsyncRpcClient(session, config.endpoint_url, timeout=config.timeout)
        )
        return await run_last_hashes(
            source=source,
            begin_block=BEGIN_BLOCK,
            count=HASH_COUNT,
            path=LAST_HASHES_PATH,
        )


def main():
    try:
        config = RpcConfig.from_env()
    except ConfigError as e:
        log.error("invalid_config", extra={"job": JOB_NAME, "error": str(e)})
        raise

    port = metrics_port()
    if port:
        start_metrics_server(port)

    log.info(
        "job_config",
        extra={
            "job": JOB_NAME,
            "begin_block": BEGIN_BLOCK,
            "count": HASH_COUNT,
            "path": LAST_HASHES_PATH,
        },
    )

    try:
        hashes = asyncio.run(_run(config))
    except Exception:
        log.exception("job_failed", extra={"job": JOB_NAME})
        raise

    log.info("last_hashes", extra={"job": JOB_NAME, "hashes": hashes})
    sys.exit(0)


if __name__ == "__main__":
    main()
