"""Initial schema: tide day cache."""

import sqlite3

DDL = [
    # One row per (spot, UTC day) of tide extremes
    """
    CREATE TABLE IF NOT EXISTS tide_cache (
        cache_key TEXT PRIMARY KEY,
        spot_id TEXT NOT NULL,
        day TEXT NOT NULL,
        payload_json TEXT NOT NULL,
        created_at TEXT NOT NULL,
        expires_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_tide_cache_expires ON tide_cache(expires_at)",
]


def up(conn: sqlite3.Connection) -> None:
    for stmt in DDL:
        conn.execute(stmt)
    conn.commit()
