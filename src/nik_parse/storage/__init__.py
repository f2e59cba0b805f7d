"""Storage module for visitor records."""

from nik_parse.storage.visitor_store import (
    MemoryVisitorStore,
    VisitorRecord,
    VisitorStats,
    VisitorStore,
)

__all__ = [
    "MemoryVisitorStore",
    "VisitorRecord",
    "VisitorStats",
    "VisitorStore",
]
