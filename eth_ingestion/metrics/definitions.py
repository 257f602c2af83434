from prometheus_client import Counter, Histogram

# -----------------------------
# Fetch (per external call)
# -----------------------------
FETCH_REQUESTS = Counter(
    "fetch_requests_total",
    "Total fetch calls issued against a data source",
    ["source"],
)

FETCH_FAILED = Counter(
    "fetch_failed_total",
    "Total fetch calls that raised",
    ["source"],
)

FETCH_LATENCY = Histogram(
    "fetch_latency_seconds",
    "Latency of a single fetch call",
    ["source"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10, 20),
)

# -----------------------------
# Throughput (per committed window)
# -----------------------------
WINDOWS_COMMITTED = Counter(
    "windows_committed_total",
    "Total windows fully fetched and appended",
    ["job"],
)

RECORDS_APPENDED = Counter(
    "records_appended_total",
    "Total records appended to the output file",
    ["job"],
)
