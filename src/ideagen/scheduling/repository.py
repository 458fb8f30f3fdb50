"""Schedule store (SQLite).

Every write goes through a compare-and-swap on the row's ``version``::

    UPDATE auto_generation_schedules SET ..., version = version + 1
    WHERE id = ? AND version = ?

so an overlapping sweep and manual trigger cannot interleave their
read-then-write cycles; the loser gets :class:`ConcurrencyConflictError`.
Driver errors are re-raised as :class:`PersistenceError`.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from ideagen.core.errors import ConcurrencyConflictError, PersistenceError
from ideagen.core.logging import get_logger
from ideagen.core.sqlite_conn import Connection
from ideagen.core.timestamps import ensure_utc, from_iso8601, generate_ulid, utc_now
from ideagen.scheduling.models import ScheduleCreate, ScheduleRecord, ScheduleUpdate

logger = get_logger(__name__)

_TABLE = "auto_generation_schedules"

# ScheduleUpdate field -> column
_COLUMNS = {
    "next_trigger": "next_trigger",
    "retry_count": "retry_count",
    "last_error": "last_error",
    "last_triggered": "last_triggered",
    "paused": "is_paused",
    "enabled": "is_active",
}


def _iso(dt: datetime | None) -> str | None:
    # Fixed-width UTC text so stored instants compare lexicographically
    if dt is None:
        return None
    return ensure_utc(dt).isoformat(timespec="microseconds")


def _to_db(field_name: str, value: Any) -> Any:
    if field_name in ("paused", "enabled"):
        return 1 if value else 0
    if isinstance(value, datetime):
        return _iso(value)
    return value


class ScheduleRepository:
    """Repository for auto-generation schedules.

    Example:
        >>> repo = ScheduleRepository(conn)
        >>> record = repo.replace_active(ScheduleCreate(
        ...     user_id="u-1",
        ...     interval_type="daily",
        ...     scheduled_time="09:00",
        ...     timezone="Europe/Zurich",
        ...     next_trigger=first_trigger,
        ... ))
        >>> due = repo.query_due(utc_now())
    """

    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @contextmanager
    def _translate(self, operation: str) -> Iterator[None]:
        try:
            yield
        except sqlite3.Error as e:
            try:
                self.conn.rollback()
            except sqlite3.Error:
                logger.warning("rollback_failed", operation=operation)
            raise PersistenceError(f"{operation} failed: {e}", cause=e).with_context(
                operation=operation
            ) from e

    # === Reads ===

    def get(self, schedule_id: str) -> ScheduleRecord | None:
        with self._translate("get_schedule"):
            cursor = self.conn.execute(f"SELECT * FROM {_TABLE} WHERE id = ?", (schedule_id,))
            row = cursor.fetchone()
        return self._row_to_record(row) if row else None

    def get_active(self, user_id: str) -> ScheduleRecord | None:
        """Return the user's active schedule, or ``None`` if auto-generation is off."""
        with self._translate("load_schedule"):
            cursor = self.conn.execute(
                f"""
                SELECT * FROM {_TABLE}
                WHERE user_id = ? AND is_active = 1
                ORDER BY created_at DESC
                LIMIT 1
                """,
                (user_id,),
            )
            row = cursor.fetchone()
        return self._row_to_record(row) if row else None

    def list_for_user(self, user_id: str) -> list[ScheduleRecord]:
        """All schedules of a user, newest first (including retired ones)."""
        with self._translate("list_schedules"):
            cursor = self.conn.execute(
                f"SELECT * FROM {_TABLE} WHERE user_id = ? ORDER BY created_at DESC",
                (user_id,),
            )
            rows = cursor.fetchall()
        return [self._row_to_record(row) for row in rows]

    def query_due(self, now: datetime) -> list[ScheduleRecord]:
        """Active, unpaused schedules with ``next_trigger <= now``.

        Callers must not rely on the order of the result.
        """
        with self._translate("query_due_schedules"):
            cursor = self.conn.execute(
                f"""
                SELECT * FROM {_TABLE}
                WHERE is_active = 1
                  AND is_paused = 0
                  AND next_trigger IS NOT NULL
                  AND next_trigger <= ?
                ORDER BY next_trigger
                """,
                (_iso(now),),
            )
            rows = cursor.fetchall()
        return [self._row_to_record(row) for row in rows]

    def count_active(self) -> int:
        with self._translate("count_schedules"):
            cursor = self.conn.execute(f"SELECT COUNT(*) FROM {_TABLE} WHERE is_active = 1")
            return cursor.fetchone()[0]

    # === Writes ===

    def replace_active(self, spec: ScheduleCreate) -> ScheduleRecord:
        """Retire every schedule of the user and insert a new active one.

        Both statements are committed together.
        """
        schedule_id = generate_ulid()
        now = _iso(utc_now())

        with self._translate("replace_schedule"):
            self.conn.execute(
                f"""
                UPDATE {_TABLE}
                SET is_active = 0, updated_at = ?, version = version + 1
                WHERE user_id = ? AND is_active = 1
                """,
                (now, spec.user_id),
            )
            self.conn.execute(
                f"""
                INSERT INTO {_TABLE} (
                    id, user_id, interval_type, scheduled_time, timezone,
                    day_of_week, notification_email, is_active, is_paused,
                    next_trigger, retry_count, last_error, last_triggered,
                    created_at, updated_at, version
                ) VALUES (?, ?, ?, ?, ?, ?, ?, 1, ?, ?, 0, NULL, NULL, ?, ?, 1)
                """,
                (
                    schedule_id,
                    spec.user_id,
                    spec.interval_type,
                    spec.scheduled_time,
                    spec.timezone,
                    spec.day_of_week,
                    spec.notification_email,
                    1 if spec.paused else 0,
                    _iso(spec.next_trigger),
                    now,
                    now,
                ),
            )
            self.conn.commit()

        logger.info(
            "schedule_created",
            user_id=spec.user_id,
            schedule_id=schedule_id,
            interval=spec.interval_type,
            next_trigger=_iso(spec.next_trigger),
        )
        return self.get(schedule_id)  # type: ignore[return-value]

    def deactivate_user(self, user_id: str) -> int:
        """Retire all active schedules of a user; ``next_trigger`` is left as is.

        Returns:
            Number of schedules retired
        """
        with self._translate("deactivate_schedules"):
            cursor = self.conn.execute(
                f"""
                UPDATE {_TABLE}
                SET is_active = 0, updated_at = ?, version = version + 1
                WHERE user_id = ? AND is_active = 1
                """,
                (_iso(utc_now()), user_id),
            )
            self.conn.commit()
            count = cursor.rowcount
        if count:
            logger.info("schedules_deactivated", user_id=user_id, count=count)
        return count

    def apply_update(self, record: ScheduleRecord, update: ScheduleUpdate) -> ScheduleRecord:
        """Write ``update`` if the row is still at ``record.version``.

        Returns:
            The record as stored after the update

        Raises:
            ConcurrencyConflictError: the row changed since ``record`` was read
            PersistenceError: the database rejected the write
        """
        changes = update.changes()
        if not changes:
            return record

        set_parts = [f"{_COLUMNS[name]} = ?" for name in changes]
        params: list[Any] = [_to_db(name, value) for name, value in changes.items()]
        set_parts.append("updated_at = ?")
        params.append(_iso(utc_now()))
        set_parts.append("version = version + 1")
        params.extend([record.id, record.version])

        with self._translate("save_schedule"):
            cursor = self.conn.execute(
                f"UPDATE {_TABLE} SET {', '.join(set_parts)} WHERE id = ? AND version = ?",
                tuple(params),
            )
            self.conn.commit()
            updated = cursor.rowcount

        if updated == 0:
            raise ConcurrencyConflictError(record.id, record.version).with_context(
                user_id=record.user_id
            )

        stored = self.get(record.id)
        if stored is None:
            raise PersistenceError(f"Schedule {record.id} disappeared after update")
        return stored

    # === Private Helpers ===

    def _row_to_record(self, row: Any) -> ScheduleRecord:
        """Convert a database row to a ScheduleRecord."""
        return ScheduleRecord(
            id=row["id"],
            user_id=row["user_id"],
            interval_type=row["interval_type"],
            scheduled_time=row["scheduled_time"],
            timezone=row["timezone"],
            day_of_week=row["day_of_week"],
            notification_email=row["notification_email"],
            enabled=bool(row["is_active"]),
            paused=bool(row["is_paused"]),
            next_trigger=from_iso8601(row["next_trigger"]),
            retry_count=row["retry_count"],
            last_error=row["last_error"],
            last_triggered=from_iso8601(row["last_triggered"]),
            created_at=from_iso8601(row["created_at"]),
            updated_at=from_iso8601(row["updated_at"]),
            version=row["version"],
        )
