import os
import sys
import asyncio
import argparse
from ..config import EtherscanConfig, ConfigError, metrics_port
from ..etherscan import EtherscanClient, open_etherscan_session
from ..execution import BatchFetcher, FileAppender
from ..ingestion import FetchPipeline, PipelineSummary
from ..logging import log
from ..metrics import start_metrics_server
from ..planning import StridedRangePlanner

JOB_NAME = "block_rewards"
BATCH_SIZE = 5


def default_filename(start_block: int, end_block: int) -> str:
    return f"{start_block}_{end_block}.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="eth-block-rewards",
        description="Download per-block miner rewards from Etherscan",
    )
    parser.add_argument("-f", "--from", dest="start_block", type=int, required=True,
                        help="The begin block of download")
    parser.add_argument("-t", "--to", dest="end_block", type=int, required=True,
                        help="The end block of download")
    parser.add_argument("-d", "--directory", required=True,
                        help="Directory to save block rewards data")
    parser.add_argument("-n", "--filename",
                        help="Filename (default: <from>_<to>.json)")
    parser.add_argument("--batch-size", type=int, default=BATCH_SIZE,
                        help="Concurrent requests per window")
    return parser


def parse_args(argv=None) -> argparse.Namespace:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.start_block < 0 or args.end_block < 0:
        parser.error("--from and --to must be non-negative")
    if args.start_block > args.end_block:
        parser.error(f"--from {args.start_block} > --to {args.end_block}")
    if args.batch_size < 1:
        parser.error("--batch-size must be >= 1")

    if not args.filename:
        args.filename = default_filename(args.start_block, args.end_block)
    return args


async def run_block_rewards(
    *,
    source,
    start_block: int,
    end_block: int,
    path: str,
    batch_size: int = BATCH_SIZE,
) -> PipelineSummary:
    """
    `source` is anything with an async get_block_reward(block_number).
    """
    pipeline = FetchPipeline(
        planner=StridedRangePlanner(start_block, end_block, stride=batch_size),
        fetcher=BatchFetcher(source.get_block_reward, source="etherscan"),
        appender=FileAppender(path),
        job_name=JOB_NAME,
    )
    return await pipeline.run()


async def _run(args: argparse.Namespace, config: EtherscanConfig) -> PipelineSummary:
    path = os.path.join(args.directory, args.filename)
    async with open_etherscan_session(config) as session:
        client = EtherscanClient(session, config)
        return await run_block_rewards(
            source=client,
            start_block=args.start_block,
            end_block=args.end_block,
            path=path,
            batch_size=args.batch_size,
        )


def main(argv=None):
    args = parse_args(argv)

    log.info(
        "job_config",
        extra={
            "job": JOB_NAME,
            "from": args.start_block,
            "to": args.end_block,
            "directory": args.directory,
            "output_file": os.path.join(args.directory, args.filename),
            "batch_size": args.batch_size,
        },
    )

    try:
        config = EtherscanConfig.from_env()
    except ConfigError as e:
        log.error("invalid_config", extra={"job": JOB_NAME, "error": str(e)})
        raise

    port = metrics_port()
    if port:
        start_metrics_server(port)

    try:
        summary = asyncio.run(_run(args, config))
    except Exception:
        log.exception("job_failed", extra={"job": JOB_NAME})
        raise

    log.info(
        "all_done",
        extra={"job": JOB_NAME, "windows": summary.windows, "records": summary.records},
    )
    return summary


if __name__ == "__main__":
    main(sys.argv[1:])
