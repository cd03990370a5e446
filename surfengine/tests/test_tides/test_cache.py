"""Tests for tide day cache stores."""

import sqlite3
from dataclasses import replace
from datetime import UTC, datetime, timedelta

import pytest

from surfengine.models.tide import TideDay, TideEvent, TideSource, TideType
from surfengine.storage import tide_cache_repo
from surfengine.tides.cache import MemoryTideCache, SqliteTideCache, day_key

NOW = datetime(2026, 3, 10, 12, tzinfo=UTC)


class FakeClock:
    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def entry() -> TideDay:
    return TideDay(
        spot_id="testbreak",
        day="2026-03-10",
        events=[
            TideEvent(datetime(2026, 3, 10, 3, tzinfo=UTC), TideType.HIGH, 0.25),
            TideEvent(datetime(2026, 3, 10, 9, tzinfo=UTC), TideType.LOW, -0.35),
        ],
        min=-0.35,
        max=0.25,
        source=TideSource.STORMGLASS,
    )


def test_day_key():
    assert day_key("maresias", "2026-03-10") == "maresias:2026-03-10"


class TestMemoryTideCache:
    def test_set_get(self, clock: FakeClock, entry: TideDay):
        cache = MemoryTideCache(clock)
        cache.set(entry, ttl_hours=48)
        assert cache.get("testbreak:2026-03-10") == entry
        assert cache.get("testbreak:2026-03-11") is None

    def test_expired_entry_is_a_miss(self, clock: FakeClock, entry: TideDay):
        cache = MemoryTideCache(clock)
        cache.set(entry, ttl_hours=2)
        clock.advance(hours=1, minutes=59)
        assert cache.get(entry.key) is not None
        clock.advance(minutes=1)
        assert cache.get(entry.key) is None

    def test_minimum_ttl(self, clock: FakeClock, entry: TideDay):
        cache = MemoryTideCache(clock)
        cache.set(entry, ttl_hours=0.1)
        clock.advance(minutes=30)
        assert cache.get(entry.key) is not None

    def test_purge_expired(self, clock: FakeClock, entry: TideDay):
        cache = MemoryTideCache(clock)
        cache.set(entry, ttl_hours=1)
        clock.advance(hours=2)
        assert cache.purge_expired() == 1
        assert len(cache) == 0


class TestSqliteTideCache:
    def test_roundtrip(self, tmp_db: sqlite3.Connection, clock: FakeClock, entry: TideDay):
        cache = SqliteTideCache(tmp_db, clock)
        cache.set(entry, ttl_hours=48)
        loaded = cache.get(entry.key)
        assert loaded == entry
        assert loaded.events[0].time.tzinfo is not None

    def test_overwrite(self, tmp_db: sqlite3.Connection, clock: FakeClock, entry: TideDay):
        cache = SqliteTideCache(tmp_db, clock)
        cache.set(entry, ttl_hours=48)
        cache.set(replace(entry, max=0.4), ttl_hours=48)
        assert cache.get(entry.key).max == 0.4
        assert tide_cache_repo.count_entries(tmp_db) == 1

    def test_expired_entry_is_a_miss(self, tmp_db: sqlite3.Connection, clock: FakeClock, entry: TideDay):
        cache = SqliteTideCache(tmp_db, clock)
        cache.set(entry, ttl_hours=1)
        clock.advance(hours=1)
        assert cache.get(entry.key) is None
        # Still on disk until purged
        assert tide_cache_repo.count_entries(tmp_db) == 1
        assert cache.purge_expired() == 1
        assert tide_cache_repo.count_entries(tmp_db) == 0

    def test_unreadable_payload(self, tmp_db: sqlite3.Connection, clock: FakeClock):
        tide_cache_repo.upsert_entry(
            tmp_db,
            cache_key="testbreak:2026-03-10",
            spot_id="testbreak",
            day="2026-03-10",
            payload_json="{not json",
            created_at=NOW.isoformat(),
            expires_at=(NOW + timedelta(hours=5)).isoformat(),
        )
        assert SqliteTideCache(tmp_db, clock).get("testbreak:2026-03-10") is None

    def test_survives_reconnect(self, tmp_path, clock: FakeClock, entry: TideDay):
        from surfengine.storage.database import connect, run_migrations

        db_path = tmp_path / "tides.db"
        conn = connect(db_path)
        run_migrations(conn)
        SqliteTideCache(conn, clock).set(entry, ttl_hours=48)
        conn.close()

        conn = connect(db_path)
        run_migrations(conn)
        assert SqliteTideCache(conn, clock).get(entry.key) == entry
        conn.close()
