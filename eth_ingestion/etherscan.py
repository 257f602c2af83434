import aiohttp
from .config import EtherscanConfig

STRIPPED_FIELDS = ("timeStamp",)


class EtherscanError(RuntimeError):
    pass


# ----------------------------------------
# Etherscan: block number → block reward
# ----------------------------------------
class EtherscanClient:
    """
    Reward data source backed by the Etherscan `block/getblockreward` action.

    The API key is sent with every request; a missing key is rejected by
    EtherscanConfig before any call is made.
    """

    def __init__(self, session: aiohttp.ClientSession, config: EtherscanConfig):
        self.session = session
        self.config = config
        self.timeout = aiohttp.ClientTimeout(total=config.timeout)

    def _params(self, block_number: int) -> dict:
        return {
            "chainid": str(self.config.chain_id),
            "module": "block",
            "action": "getblockreward",
            "blockno": str(block_number),
            "apikey": self.config.api_key,
        }

    async def get_block_reward(self, block_number: int) -> dict:
        async with self.session.get(
            self.config.endpoint_url,
            params=self._params(block_number),
            timeout=self.timeout,
        ) as resp:
            if resp.status >= 400:
                raise EtherscanError(
                    f"HTTP {resp.status} for getblockreward (block={block_number})"
                )
            data = await resp.json(content_type=None)

        if not isinstance(data, dict):
            raise EtherscanError(f"Malformed response: {data!r}")

        result = data.get("result")
        # status "0" carries the error text in result
        if data.get("status") != "1" or not isinstance(result, dict):
            raise EtherscanError(
                f"getblockreward failed (block={block_number}): "
                f"{data.get('message')} {result}"
            )

        return strip_fields(result)


def strip_fields(record: dict, fields=STRIPPED_FIELDS) -> dict:
    return {k: v for k, v in record.items() if k not in fields}


def open_etherscan_session(config: EtherscanConfig) -> aiohttp.ClientSession:
    return aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=config.timeout),
    )
