import os
from dataclasses import dataclass

DEFAULT_ETHERSCAN_API_URL = "https://api.etherscan.io/v2/api"
DEFAULT_CHAIN_ID = 1
DEFAULT_HTTP_TIMEOUT = 10.0

PLACEHOLDER = "<YOUR_API_KEY>"


class ConfigError(RuntimeError):
    pass


def _require(name: str, value: str | None) -> str:
    if not value or PLACEHOLDER in value:
        raise ConfigError(f"{name} is not configured")
    return value


def _float_env(env: dict, name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got: {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got: {value}")
    return value


def _int_env(env: dict, name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got: {raw!r}") from None


# -----------------------------
# Etherscan (reward data source)
# -----------------------------
@dataclass(frozen=True)
class EtherscanConfig:
    api_key: str
    endpoint_url: str = DEFAULT_ETHERSCAN_API_URL
    chain_id: int = DEFAULT_CHAIN_ID
    timeout: float = DEFAULT_HTTP_TIMEOUT

    def __post_init__(self):
        _require("api_key", self.api_key)
        _require("endpoint_url", self.endpoint_url)

    @classmethod
    def from_env(cls, env: dict | None = None) -> "EtherscanConfig":
        env = os.environ if env is None else env
        return cls(
            api_key=_require("ETH_ETHERSCAN_API_KEY", env.get("ETH_ETHERSCAN_API_KEY")),
            endpoint_url=env.get("ETH_ETHERSCAN_API_URL") or DEFAULT_ETHERSCAN_API_URL,
            chain_id=_int_env(env, "ETHERSCAN_CHAIN_ID", DEFAULT_CHAIN_ID),
            timeout=_float_env(env, "HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        )


# -----------------------------
# JSON-RPC node (chain data source)
# -----------------------------
@dataclass(frozen=True)
class RpcConfig:
    endpoint_url: str
    timeout: float = DEFAULT_HTTP_TIMEOUT

    def __post_init__(self):
        _require("endpoint_url", self.endpoint_url)

    @classmethod
    def from_env(cls, env: dict | None = None) -> "RpcConfig":
        env = os.environ if env is None else env
        return cls(
            endpoint_url=_require("ETH_RPC_URL", env.get("ETH_RPC_URL")),
            timeout=_float_env(env, "HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        )


def metrics_port(env: dict | None = None) -> int | None:
    env = os.environ if env is None else env
    if not env.get("METRICS_PORT"):
        return None
    port = _int_env(env, "METRICS_PORT", 0)
    if not 1 <= port <= 65535:
        raise ConfigError(f"METRICS_PORT must be in 1..65535, got: {port}")
    return port
