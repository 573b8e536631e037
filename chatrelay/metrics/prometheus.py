"""Prometheus metrics - minimal implementation."""
from prometheus_client import Counter, Histogram

# Relay outcomes per provider
requests_total = Counter(
    "chatrelay_requests_total",
    "Total relay requests",
    ["provider", "outcome"],
)

# Time from request to terminal relay state
request_latency_ms = Histogram(
    "chatrelay_request_latency_ms",
    "Relay latency in milliseconds",
    ["provider"],
    buckets=[10, 50, 100, 200, 500, 1000, 2000, 5000, 10000, 30000, 60000],
)

# Errors counter with detailed labels
errors_total = Counter(
    "chatrelay_errors_total",
    "Total relay errors",
    ["provider", "error_code", "upstream_status"],
)

# Chunks relayed to clients
stream_chunks_total = Counter(
    "chatrelay_stream_chunks_total",
    "Total upstream chunks relayed as events",
    ["provider"],
)
