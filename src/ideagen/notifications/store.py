"""In-app notification inbox (``notifications`` table)."""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ideagen.core.errors import PersistenceError
from ideagen.core.sqlite_conn import Connection
from ideagen.core.timestamps import from_iso8601, generate_ulid
from ideagen.notifications.events import NotificationEvent

DEFAULT_LIST_LIMIT = 50


@dataclass
class Notification:
    """Stored notification row."""

    id: str
    user_id: str
    type: str
    title: str
    message: str
    metadata: dict[str, Any] = field(default_factory=dict)
    read: bool = False
    created_at: datetime | None = None


class NotificationRepository:
    """CRUD for a user's notification inbox."""

    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @contextmanager
    def _translate(self, operation: str) -> Iterator[None]:
        try:
            yield
        except sqlite3.Error as e:
            raise PersistenceError(f"{operation} failed: {e}", cause=e).with_context(
                operation=operation
            ) from e

    def add(self, event: NotificationEvent) -> Notification:
        notification_id = generate_ulid()
        with self._translate("add_notification"):
            self.conn.execute(
                """
                INSERT INTO notifications (id, user_id, type, title, message, metadata, is_read, created_at)
                VALUES (?, ?, ?, ?, ?, ?, 0, ?)
                """,
                (
                    notification_id,
                    event.user_id,
                    event.kind.value,
                    event.title,
                    event.message,
                    json.dumps(event.metadata, default=str),
                    event.created_at.isoformat(timespec="microseconds"),
                ),
            )
            self.conn.commit()
        return Notification(
            id=notification_id,
            user_id=event.user_id,
            type=event.kind.value,
            title=event.title,
            message=event.message,
            metadata=dict(event.metadata),
            created_at=event.created_at,
        )

    def get(self, user_id: str, notification_id: str) -> Notification | None:
        with self._translate("get_notification"):
            cursor = self.conn.execute(
                "SELECT * FROM notifications WHERE id = ? AND user_id = ?",
                (notification_id, user_id),
            )
            row = cursor.fetchone()
        return self._row_to_notification(row) if row else None

    def list_for_user(
        self, user_id: str, limit: int = DEFAULT_LIST_LIMIT, unread_only: bool = False
    ) -> list[Notification]:
        """Newest first."""
        sql = "SELECT * FROM notifications WHERE user_id = ?"
        if unread_only:
            sql += " AND is_read = 0"
        sql += " ORDER BY created_at DESC, id DESC LIMIT ?"
        with self._translate("list_notifications"):
            cursor = self.conn.execute(sql, (user_id, limit))
            rows = cursor.fetchall()
        return [self._row_to_notification(row) for row in rows]

    def count_unread(self, user_id: str) -> int:
        with self._translate("count_notifications"):
            cursor = self.conn.execute(
                "SELECT COUNT(*) FROM notifications WHERE user_id = ? AND is_read = 0",
                (user_id,),
            )
            return cursor.fetchone()[0]

    def mark_read(self, user_id: str, notification_id: str) -> bool:
        with self._translate("mark_notification_read"):
            cursor = self.conn.execute(
                "UPDATE notifications SET is_read = 1 WHERE id = ? AND user_id = ?",
                (notification_id, user_id),
            )
            self.conn.commit()
            return cursor.rowcount > 0

    def mark_all_read(self, user_id: str) -> int:
        with self._translate("mark_notifications_read"):
            cursor = self.conn.execute(
                "UPDATE notifications SET is_read = 1 WHERE user_id = ? AND is_read = 0",
                (user_id,),
            )
            self.conn.commit()
            return cursor.rowcount

    def delete(self, user_id: str, notification_id: str) -> bool:
        with self._translate("delete_notification"):
            cursor = self.conn.execute(
                "DELETE FROM notifications WHERE id = ? AND user_id = ?",
                (notification_id, user_id),
            )
            self.conn.commit()
            return cursor.rowcount > 0

    def clear_all(self, user_id: str) -> int:
        """Delete every notification of the user; returns how many were removed."""
        with self._translate("clear_notifications"):
            cursor = self.conn.execute(
                "DELETE FROM notifications WHERE user_id = ?",
                (user_id,),
            )
            self.conn.commit()
            return cursor.rowcount

    def _row_to_notification(self, row: Any) -> Notification:
        metadata = json.loads(row["metadata"]) if row["metadata"] else {}
        return Notification(
            id=row["id"],
            user_id=row["user_id"],
            type=row["type"],
            title=row["title"],
            message=row["message"],
            metadata=metadata,
            read=bool(row["is_read"]),
            created_at=from_iso8601(row["created_at"]),
        )
