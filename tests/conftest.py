"""
Shared fakes for the ingestion tests.
"""

import asyncio
import logging
import threading
import random
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer


def fake_hash(block_number: int) -> str:
    return "0x" + format(block_number, "064x")


def fake_reward(block_number: int) -> dict:
    return {
        "blockNumber": str(block_number),
        "timeStamp": "1559700000",
        "blockMiner": "0xea674fdde714fd979de3edf0f56aa9716b898ec8",
        "blockReward": str(2000000000000000000 + block_number),
        "uncles": [],
        "uncleInclusionReward": "0",
    }


class FakeRewardSource:
    """Reward source with random latency so completion order differs from request order."""

    def __init__(self, fail_on=(), strip=True):
        self.fail_on = set(fail_on)
        self.strip = strip
        self.calls = []

    async def get_block_reward(self, block_number: int) -> dict:
        self.calls.append(block_number)
        await asyncio.sleep(random.uniform(0, 0.01))
        if block_number in self.fail_on:
            raise ConnectionError(f"boom at {block_number}")
        record = fake_reward(block_number)
        if self.strip:
            record.pop("timeStamp")
        return record


class FakeHashSource:
    def __init__(self, fail_on=()):
        self.fail_on = set(fail_on)
        self.calls = []

    async def get_block_hash(self, block_number: int) -> str:
        self.calls.append(block_number)
        await asyncio.sleep(random.uniform(0, 0.01))
        if block_number in self.fail_on:
            raise TimeoutError(f"timeout at {block_number}")
        return fake_hash(block_number)


@pytest.fixture
def reward_source():
    return FakeRewardSource()


@pytest.fixture
def hash_source():
    return FakeHashSource()


async def serve(routes, fn):
    """
    Start a local aiohttp app with `routes` [(method, path, handler)], then
    await fn(base_url).
    """
    app = web.Application()
    for method, path, handler in routes:
        app.router.add_route(method, path, handler)
    async with TestServer(app) as server:
        return await fn(str(server.make_url("")).rstrip("/"))


def read_lines(path) -> list[str]:
    with open(path, encoding="utf-8") as f:
        return f.read().splitlines()


class ThreadedServer:
    """
    Local aiohttp app on its own event loop thread, for code that calls
    asyncio.run() itself (the job entrypoints).
    """

    def __init__(self, routes):
        self.routes = routes
        self.loop = asyncio.new_event_loop()
        self.runner = None
        self.port = None
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._started = threading.Event()

    def _serve(self):
        asyncio.set_event_loop(self.loop)
        app = web.Application()
        for method, path, handler in self.routes:
            app.router.add_route(method, path, handler)
        self.runner = web.AppRunner(app)
        self.loop.run_until_complete(self.runner.setup())
        site = web.TCPSite(self.runner, "127.0.0.1", 0)
        self.loop.run_until_complete(site.start())
        self.port = self.runner.addresses[0][1]
        self._started.set()
        self.loop.run_forever()

    def __enter__(self) -> str:
        self._thread.start()
        assert self._started.wait(10), "server did not start"
        return f"http://127.0.0.1:{self.port}"

    def __exit__(self, *exc):
        asyncio.run_coroutine_threadsafe(self.runner.cleanup(), self.loop).result(10)
        self.loop.call_soon_threadsafe(self.loop.stop)
        self._thread.join(10)
        self.loop.close()


class _EventCollector(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)

    def events(self, msg):
        return [r for r in self.records if r.getMessage() == msg]


@pytest.fixture
def log_events():
    from eth_ingestion.logging import log

    collector = _EventCollector()
    log.logger.addHandler(collector)
    yield collector
    log.logger.removeHandler(collector)
