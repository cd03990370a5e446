"""Keyed tide-day cache stores with TTL expiry.

Stores are created once at startup and shared for the process lifetime.
Entries expire by TTL; an entry at or past its expiry is a miss and is never
returned, even if it has not been purged yet.
"""

import json
import logging
import sqlite3
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Protocol

from surfengine.models.common import utc_now
from surfengine.models.tide import TideDay
from surfengine.storage import tide_cache_repo

logger = logging.getLogger(__name__)

MIN_TTL_HOURS = 1.0

Clock = Callable[[], datetime]


def day_key(spot_id: str, day: str) -> str:
    return f"{spot_id}:{day}"


class TideCacheStore(Protocol):
    def get(self, key: str) -> TideDay | None: ...

    def set(self, entry: TideDay, ttl_hours: float) -> None: ...

    def purge_expired(self) -> int: ...


class MemoryTideCache:
    """Process-local dict store."""

    def __init__(self, clock: Clock = utc_now):
        self._clock = clock
        self._entries: dict[str, tuple[TideDay, datetime]] = {}

    def get(self, key: str) -> TideDay | None:
        item = self._entries.get(key)
        if item is None:
            return None
        entry, expires_at = item
        if expires_at <= self._clock():
            return None
        return entry

    def set(self, entry: TideDay, ttl_hours: float) -> None:
        expires_at = self._clock() + timedelta(hours=max(MIN_TTL_HOURS, ttl_hours))
        self._entries[entry.key] = (entry, expires_at)

    def purge_expired(self) -> int:
        now = self._clock()
        stale = [k for k, (_, exp) in self._entries.items() if exp <= now]
        for k in stale:
            del self._entries[k]
        return len(stale)

    def __len__(self) -> int:
        return len(self._entries)


class SqliteTideCache:
    """SQLite-backed store; survives restarts and can be shared by workers."""

    def __init__(self, conn: sqlite3.Connection, clock: Clock = utc_now):
        self.conn = conn
        self._clock = clock

    def get(self, key: str) -> TideDay | None:
        row = tide_cache_repo.get_entry(self.conn, key)
        if row is None:
            return None
        if datetime.fromisoformat(row["expires_at"]) <= self._clock():
            return None
        try:
            return TideDay.from_dict(json.loads(row["payload_json"]))
        except (ValueError, KeyError):
            logger.warning("Discarding unreadable tide cache entry %s", key)
            return None

    def set(self, entry: TideDay, ttl_hours: float) -> None:
        now = self._clock()
        expires_at = now + timedelta(hours=max(MIN_TTL_HOURS, ttl_hours))
        tide_cache_repo.upsert_entry(
            self.conn,
            cache_key=entry.key,
            spot_id=entry.spot_id,
            day=entry.day,
            payload_json=json.dumps(entry.to_dict()),
            created_at=now.isoformat(timespec="seconds"),
            expires_at=expires_at.isoformat(timespec="seconds"),
        )

    def purge_expired(self) -> int:
        return tide_cache_repo.delete_expired(
            self.conn, self._clock().isoformat(timespec="seconds")
        )
