"""Repository for cached tide days."""

import sqlite3


def get_entry(conn: sqlite3.Connection, cache_key: str) -> dict | None:
    """Get a cached tide day row by key, expired or not."""
    row = conn.execute(
        "SELECT * FROM tide_cache WHERE cache_key = ?", (cache_key,)
    ).fetchone()
    if row is None:
        return None
    return dict(row)


def upsert_entry(
    conn: sqlite3.Connection,
    cache_key: str,
    spot_id: str,
    day: str,
    payload_json: str,
    created_at: str,
    expires_at: str,
) -> None:
    """Insert or replace a cached tide day."""
    conn.execute(
        "INSERT INTO tide_cache (cache_key, spot_id, day, payload_json, created_at, expires_at) "
        "VALUES (?, ?, ?, ?, ?, ?) "
        "ON CONFLICT(cache_key) DO UPDATE SET payload_json = excluded.payload_json, "
        "created_at = excluded.created_at, expires_at = excluded.expires_at",
        (cache_key, spot_id, day, payload_json, created_at, expires_at),
    )
    conn.commit()


def delete_expired(conn: sqlite3.Connection, now_iso: str) -> int:
    """Delete entries whose expiry is at or before now. Returns rows removed."""
    cursor = conn.execute("DELETE FROM tide_cache WHERE expires_at <= ?", (now_iso,))
    conn.commit()
    return cursor.rowcount


def count_entries(conn: sqlite3.Connection) -> int:
    return conn.execute("SELECT COUNT(*) FROM tide_cache").fetchone()[0]
