"""
Table definitions for ideagen.

Tables:
    - auto_generation_schedules: one row per configured schedule; at most
      one ``is_active = 1`` row per user
    - schedule_locks: per-user leases held during an orchestrator run
    - notifications: in-app notification inbox

All timestamps are stored as UTC ISO-8601 text.  ``version`` is bumped on
every update and used as the compare-and-swap token.
"""

from __future__ import annotations

from pathlib import Path

from ideagen.core.sqlite_conn import SqliteConnection

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS auto_generation_schedules (
    id TEXT NOT NULL PRIMARY KEY,
    user_id TEXT NOT NULL,
    interval_type TEXT NOT NULL,
    scheduled_time TEXT,
    timezone TEXT NOT NULL DEFAULT 'UTC',
    day_of_week INTEGER,
    notification_email TEXT,
    is_active INTEGER NOT NULL DEFAULT 1,
    is_paused INTEGER NOT NULL DEFAULT 0,
    next_trigger TEXT,
    retry_count INTEGER NOT NULL DEFAULT 0,
    last_error TEXT,
    last_triggered TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    version INTEGER NOT NULL DEFAULT 1
);

CREATE INDEX IF NOT EXISTS idx_schedules_user
    ON auto_generation_schedules (user_id, is_active);

CREATE INDEX IF NOT EXISTS idx_schedules_due
    ON auto_generation_schedules (is_active, is_paused, next_trigger);

CREATE TABLE IF NOT EXISTS schedule_locks (
    lock_key TEXT NOT NULL PRIMARY KEY,
    locked_by TEXT NOT NULL,
    lease_token TEXT NOT NULL DEFAULT '',
    locked_at TEXT NOT NULL,
    expires_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS notifications (
    id TEXT NOT NULL PRIMARY KEY,
    user_id TEXT NOT NULL,
    type TEXT NOT NULL,
    title TEXT NOT NULL,
    message TEXT NOT NULL,
    metadata TEXT,
    is_read INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_notifications_user
    ON notifications (user_id, created_at);
"""


def init_schema(conn: SqliteConnection) -> None:
    """Create all tables (idempotent)."""
    conn.executescript(SCHEMA_SQL)
    conn.commit()


def open_database(path: str | Path = ":memory:", *, init: bool = True) -> SqliteConnection:
    """Open a SQLite database and optionally apply the schema."""
    conn = SqliteConnection(path)
    if init:
        init_schema(conn)
    return conn
