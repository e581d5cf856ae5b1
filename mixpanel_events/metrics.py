"""Prometheus metrics for outbound requests."""
from prometheus_client import Counter, Histogram

REQUESTS_TOTAL = Counter(
    "mixpanel_requests_total",
    "Total requests issued to the ingestion service",
    ["endpoint", "outcome"],
)
REQUEST_LATENCY = Histogram(
    "mixpanel_request_duration_seconds",
    "Request latency in seconds",
    ["endpoint"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)
INCREMENT_VALUES_DROPPED = Counter(
    "mixpanel_increment_values_dropped_total",
    "Non-numeric increment entries dropped before sending",
)
