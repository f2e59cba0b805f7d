"""
Visitor storage.

Keeps a record of page views and answers aggregate counts. The in-memory
store lives for the lifetime of the process; nothing is persisted and
records are never evicted.
"""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from nik_parse.metrics.collectors import VISITOR_STORE_SIZE


DEFAULT_RECENT_LIMIT = 10


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class VisitorRecord:
    """A single page view.

    Attributes:
        ip: Origin address of the request.
        user_agent: Client identifier string.
        timestamp: ISO-8601 UTC timestamp of the visit.
        page: Requested page path.
    """

    ip: str
    user_agent: str
    timestamp: str
    page: str

    @property
    def visited_at(self) -> datetime:
        return datetime.fromisoformat(self.timestamp)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase keys used on the wire."""
        return {
            "ip": self.ip,
            "userAgent": self.user_agent,
            "timestamp": self.timestamp,
            "page": self.page,
        }


@dataclass
class VisitorStats:
    """Aggregate visitor counts."""

    total: int = 0
    unique: int = 0
    today: int = 0
    recent: list[VisitorRecord] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "unique": self.unique,
            "today": self.today,
            "recent": [record.to_dict() for record in self.recent],
        }


class VisitorStore(ABC):
    """Interface for visitor record storage."""

    @abstractmethod
    def record(self, ip: str, user_agent: str, page: str) -> VisitorRecord:
        """Append a visit stamped with the current time."""

    @abstractmethod
    def stats(self) -> VisitorStats:
        """Return aggregate counts without modifying the store."""

    @abstractmethod
    def clear(self) -> None:
        """Remove all records."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of stored records."""


class MemoryVisitorStore(VisitorStore):
    """In-memory, append-only visitor store.

    Counts are recomputed from the full list on every read. "Today" uses the
    server's local calendar day.

    Example:
        >>> store = MemoryVisitorStore()
        >>> _ = store.record("10.0.0.1", "curl/8.0", "/")
        >>> store.stats().total
        1
    """

    def __init__(
        self,
        recent_limit: int = DEFAULT_RECENT_LIMIT,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the store.

        Args:
            recent_limit: Number of records returned in stats().recent.
            clock: Returns the current timezone-aware time.
        """
        self.recent_limit = recent_limit
        self._clock = clock
        self._records: list[VisitorRecord] = []
        self._lock = threading.RLock()

    def record(self, ip: str, user_agent: str, page: str) -> VisitorRecord:
        visit = VisitorRecord(
            ip=ip,
            user_agent=user_agent,
            timestamp=self._clock().astimezone(timezone.utc).isoformat(),
            page=page,
        )
        with self._lock:
            self._records.append(visit)
            VISITOR_STORE_SIZE.set(len(self._records))
        return visit

    def stats(self, now: Optional[datetime] = None) -> VisitorStats:
        """Aggregate counts.

        Args:
            now: Reference time for the "today" count (defaults to the clock).
        """
        today = (now or self._clock()).astimezone().date()

        with self._lock:
            records = list(self._records)

        recent = records[-self.recent_limit:] if self.recent_limit > 0 else []
        return VisitorStats(
            total=len(records),
            unique=len({r.ip for r in records}),
            today=sum(1 for r in records if r.visited_at.astimezone().date() == today),
            recent=list(reversed(recent)),
        )

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
            VISITOR_STORE_SIZE.set(0)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __repr__(self) -> str:
        return f"MemoryVisitorStore(records={len(self)})"
