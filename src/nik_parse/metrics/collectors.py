"""Prometheus metrics collectors for NIK-PARSE.

Defines all application metrics for monitoring and observability.
"""

from prometheus_client import Counter, Gauge, Histogram

# Request metrics
REQUEST_LATENCY = Histogram(
    "nik_parse_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint", "status"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

REQUEST_COUNT = Counter(
    "nik_parse_requests_total",
    "Total request count",
    ["method", "endpoint", "status"],
)

ACTIVE_REQUESTS = Gauge(
    "nik_parse_active_requests",
    "Currently processing requests",
)

# Decode outcomes, labelled "success" or the failure reason
DECODE_RESULTS = Counter(
    "nik_parse_decode_total",
    "Total NIK decode attempts by result",
    ["result"],
)

# Visitor store metrics
VISITOR_STORE_SIZE = Gauge(
    "nik_parse_visitor_store_size",
    "Number of visitor records held in memory",
)

# Region table
REGION_ENTRIES = Gauge(
    "nik_parse_region_entries",
    "Number of district entries in the loaded region table",
)
