from prometheus_client import start_http_server

from .definitions import (
    FETCH_REQUESTS,
    FETCH_FAILED,
    FETCH_LATENCY,
    WINDOWS_COMMITTED,
    RECORDS_APPENDED,
)


def start_metrics_server(port: int):
    """Expose /metrics on the given port for the lifetime of the process."""
    start_http_server(port)


__all__ = [
    "FETCH_REQUESTS",
    "FETCH_FAILED",
    "FETCH_LATENCY",
    "WINDOWS_COMMITTED",
    "RECORDS_APPENDED",
    "start_metrics_server",
]
