"""Prometheus metrics for NIK-PARSE."""

from nik_parse.metrics.collectors import (
    ACTIVE_REQUESTS,
    DECODE_RESULTS,
    REGION_ENTRIES,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    VISITOR_STORE_SIZE,
)

__all__ = [
    "ACTIVE_REQUESTS",
    "DECODE_RESULTS",
    "REGION_ENTRIES",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "VISITOR_STORE_SIZE",
]
