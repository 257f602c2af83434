import itertools
import aiohttp
from .config import RpcConfig

# -----------------------------
# Exceptions
# -----------------------------
class RpcError(RuntimeError): pass
class RpcRateLimitError(RpcError): pass

# Disable brotli to stay on encodings aiohttp always supports
RPC_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
    "Accept-Encoding": "gzip, deflate",
}

_request_ids = itertools.count(1)


# -----------------------------
# AsyncRpcClient
# Sends one JSON-RPC request, returns its result
# -----------------------------
class AsyncRpcClient:
    def __init__(self, session: aiohttp.ClientSession, url: str, timeout: float = 10):
        self.session = session
        self.url = url
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def call(self, method: str, params: list):
        payload = {
            "jsonrpc": "2.0",
            "id": next(_request_ids),
            "method": method,
            "params": params,
        }

        async with self.session.post(
            self.url,
            json=payload,
            headers=RPC_HEADERS,
            timeout=self.timeout,
        ) as resp:
            if resp.status == 429:
                raise RpcRateLimitError("HTTP 429 rate limited")
            if resp.status >= 400:
                raise RpcError(f"HTTP {resp.status} from {method}")
            data = await resp.json(content_type=None)

        if not isinstance(data, dict):
            raise RpcError(f"Malformed JSON-RPC response for {method}: {data!r}")

        if data.get("error") is not None:
            raise RpcError(data["error"])

        return data.get("result")


# -----------------------------
# Chain data source: block number -> block hash
# -----------------------------
class ChainBlockSource:
    def __init__(self, client: AsyncRpcClient):
        self.client = client

    async def get_block(self, block_number: int) -> dict:
        block = await self.client.call(
            "eth_getBlockByNumber",
            [hex(block_number), False],
        )
        if block is None:
            raise RpcError(f"Block {block_number} not found")
        return block

    async def get_block_hash(self, block_number: int) -> str:
        block = await self.get_block(block_number)
        block_hash = block.get("hash")
        if not block_hash:
            raise RpcError(f"Block {block_number} has no hash")
        return block_hash


def open_rpc_session(config: RpcConfig) -> aiohttp.ClientSession:
    return aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=config.timeout),
    )
