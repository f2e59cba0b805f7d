"""Unit tests for the visitor store."""

import threading
from datetime import datetime, timedelta, timezone

import pytest

from nik_parse.storage.visitor_store import (
    DEFAULT_RECENT_LIMIT,
    MemoryVisitorStore,
    VisitorRecord,
    VisitorStats,
    VisitorStore,
)


class TestVisitorRecord:
    def test_to_dict_uses_wire_keys(self):
        record = VisitorRecord("10.0.0.1", "curl/8.0", "2026-10-19T12:00:00+00:00", "/")

        assert record.to_dict() == {
            "ip": "10.0.0.1",
            "userAgent": "curl/8.0",
            "timestamp": "2026-10-19T12:00:00+00:00",
            "page": "/",
        }

    def test_visited_at(self):
        record = VisitorRecord("10.0.0.1", "ua", "2026-10-19T12:00:00+00:00", "/")
        assert record.visited_at == datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class TestMemoryVisitorStore:
    """Tests for MemoryVisitorStore."""

    def test_is_visitor_store(self):
        assert isinstance(MemoryVisitorStore(), VisitorStore)

    def test_empty_stats(self):
        stats = MemoryVisitorStore().stats()

        assert stats == VisitorStats(total=0, unique=0, today=0, recent=[])

    def test_record_stamps_utc_time(self, clock):
        store = MemoryVisitorStore(clock=clock)
        record = store.record("10.0.0.1", "curl/8.0", "/")

        assert record.timestamp == "2026-10-19T12:00:00+00:00"
        assert len(store) == 1

    def test_total_and_unique(self, clock):
        store = MemoryVisitorStore(clock=clock)
        store.record("10.0.0.1", "ua-1", "/")
        store.record("10.0.0.2", "ua-2", "/")
        store.record("10.0.0.1", "ua-1", "/about")

        stats = store.stats()
        assert stats.total == 3
        assert stats.unique == 2

    def test_stats_is_idempotent(self, clock):
        store = MemoryVisitorStore(clock=clock)
        store.record("10.0.0.1", "ua", "/")
        store.record("10.0.0.2", "ua", "/")

        assert store.stats() == store.stats()
        assert len(store) == 2

    def test_today_counts_local_calendar_day(self, clock):
        store = MemoryVisitorStore(clock=clock)
        store.record("10.0.0.1", "ua", "/")

        clock.now = clock.now - timedelta(days=3)
        store.record("10.0.0.2", "ua", "/")

        clock.now = clock.now + timedelta(days=3)
        stats = store.stats()
        assert stats.total == 2
        assert stats.today == 1

    def test_explicit_now(self, clock):
        store = MemoryVisitorStore(clock=clock)
        store.record("10.0.0.1", "ua", "/")

        later = clock.now + timedelta(days=2)
        assert store.stats(now=later).today == 0
        assert store.stats(now=clock.now).today == 1

    def test_recent_is_newest_first_and_limited(self, clock):
        store = MemoryVisitorStore(clock=clock)
        for i in range(15):
            clock.now = clock.now + timedelta(seconds=1)
            store.record(f"10.0.0.{i}", "ua", f"/page/{i}")

        recent = store.stats().recent
        assert len(recent) == DEFAULT_RECENT_LIMIT
        assert [r.page for r in recent] == [f"/page/{i}" for i in range(14, 4, -1)]

    def test_custom_recent_limit(self, clock):
        store = MemoryVisitorStore(recent_limit=2, clock=clock)
        for page in ("/a", "/b", "/c"):
            store.record("10.0.0.1", "ua", page)

        assert [r.page for r in store.stats().recent] == ["/c", "/b"]

    def test_zero_recent_limit(self, clock):
        store = MemoryVisitorStore(recent_limit=0, clock=clock)
        store.record("10.0.0.1", "ua", "/")

        assert store.stats().recent == []

    def test_clear(self, clock):
        store = MemoryVisitorStore(clock=clock)
        store.record("10.0.0.1", "ua", "/")
        store.clear()

        assert len(store) == 0
        assert store.stats().total == 0

    def test_stats_to_dict(self, clock):
        store = MemoryVisitorStore(clock=clock)
        store.record("10.0.0.1", "ua", "/")

        data = store.stats().to_dict()
        assert data["total"] == 1
        assert data["recent"][0]["userAgent"] == "ua"

    def test_concurrent_records(self):
        store = MemoryVisitorStore()

        def worker(n: int) -> None:
            for _ in range(100):
                store.record(f"10.0.0.{n}", "ua", "/")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        stats = store.stats()
        assert stats.total == 500
        assert stats.unique == 5


class TestVisitorStoreInterface:
    def test_cannot_instantiate_abstract(self):
        with pytest.raises(TypeError):
            VisitorStore()
