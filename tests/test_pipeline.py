"""
End-to-end tests for the window pipeline with fake data sources.
"""

import json
import asyncio
import pytest

from eth_ingestion import (
    BatchFetcher,
    BatchFetchError,
    DescendingRangePlanner,
    FetchPipeline,
    FileAppender,
    StridedRangePlanner,
)

from conftest import FakeRewardSource, FakeHashSource, fake_hash, read_lines


def _reward_pipeline(source, start, end, path):
    return FetchPipeline(
        planner=StridedRangePlanner(start, end),
        fetcher=BatchFetcher(source.get_block_reward, source="fake"),
        appender=FileAppender(str(path)),
        job_name="test_rewards",
    )


class TestRewardPipeline:
    def test_range_100_to_104(self, tmp_path, reward_source):
        path = tmp_path / "r.json"

        summary = asyncio.run(_reward_pipeline(reward_source, 100, 104, path).run())

        records = [json.loads(line) for line in read_lines(path)]
        assert summary.windows == 1
        assert summary.records == 5
        assert [r["blockNumber"] for r in records] == ["100", "101", "102", "103", "104"]
        assert all("timeStamp" not in r for r in records)

    def test_ascending_with_overshoot(self, tmp_path, reward_source):
        path = tmp_path / "r.json"

        asyncio.run(_reward_pipeline(reward_source, 10, 21, path).run())

        blocks = [int(json.loads(line)["blockNumber"]) for line in read_lines(path)]
        assert blocks == list(range(10, 25))

    def test_failed_window_writes_nothing(self, tmp_path):
        path = tmp_path / "r.json"
        # third window: 110..114, fails at offset 3
        source = FakeRewardSource(fail_on={113})

        with pytest.raises(BatchFetchError) as exc_info:
            asyncio.run(_reward_pipeline(source, 100, 119, path).run())

        blocks = [int(json.loads(line)["blockNumber"]) for line in read_lines(path)]
        assert blocks == list(range(100, 110))
        assert exc_info.value.block_number == 113
        assert isinstance(exc_info.value.__cause__, ConnectionError)
        # nothing past the failed window was requested
        assert max(source.calls) == 114

    def test_rerun_appends_duplicates(self, tmp_path, reward_source):
        path = tmp_path / "r.json"

        asyncio.run(_reward_pipeline(reward_source, 0, 4, path).run())
        asyncio.run(_reward_pipeline(reward_source, 0, 4, path).run())

        assert len(read_lines(path)) == 10

    def test_windows_do_not_overlap(self, tmp_path):
        path = tmp_path / "r.json"
        events = []

        class Tracking(FakeRewardSource):
            async def get_block_reward(self, block_number):
                events.append(("fetch", block_number))
                return await super().get_block_reward(block_number)

        pipeline = _reward_pipeline(Tracking(), 0, 9, path)
        pipeline.on_window = lambda window, results: events.append(("commit", window.window_id))

        asyncio.run(pipeline.run())

        commit_first = events.index(("commit", 0))
        assert all(bn < 5 for kind, bn in events[:commit_first] if kind == "fetch")
        assert all(bn >= 5 for kind, bn in events[commit_first + 1:] if kind == "fetch")


class TestHashPipeline:
    def test_three_hashes_most_recent_first(self, tmp_path, hash_source):
        path = tmp_path / "lastHashes7840001"

        pipeline = FetchPipeline(
            planner=DescendingRangePlanner(7840001, 3),
            fetcher=BatchFetcher(hash_source.get_block_hash, source="fake"),
            appender=FileAppender(str(path)),
            job_name="test_hashes",
        )
        asyncio.run(pipeline.run())

        assert read_lines(path) == [fake_hash(7840000), fake_hash(7839999), fake_hash(7839998)]

    def test_transform_applied_before_append(self, tmp_path, hash_source):
        path = tmp_path / "hashes"

        pipeline = FetchPipeline(
            planner=DescendingRangePlanner(10, 2),
            fetcher=BatchFetcher(hash_source.get_block_hash),
            appender=FileAppender(str(path)),
            job_name="test_hashes",
            transform=str.upper,
        )
        asyncio.run(pipeline.run())

        assert read_lines(path) == [fake_hash(9).upper(), fake_hash(8).upper()]

    def test_failure_writes_nothing(self, tmp_path):
        path = tmp_path / "hashes"
        source = FakeHashSource(fail_on={98})

        pipeline = FetchPipeline(
            planner=DescendingRangePlanner(100, 5),
            fetcher=BatchFetcher(source.get_block_hash),
            appender=FileAppender(str(path)),
            job_name="test_hashes",
        )

        with pytest.raises(BatchFetchError):
            asyncio.run(pipeline.run())

        assert not path.exists()
        assert sorted(source.calls) == [95, 96, 97, 98, 99]
