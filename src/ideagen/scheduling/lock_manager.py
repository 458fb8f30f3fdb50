"""Per-user lease for orchestrator runs.

Two overlapping sweeps (or a sweep and a manual trigger) must never run
generation for the same user at the same time.  ``acquire`` inserts a
row keyed by ``user:<user_id>`` with a TTL and hands back a fresh lease
token; any second caller sees the row and skips the user, even one in
the same process.  ``release`` deletes the row only when the token
matches, so a run can never drop a lease it does not own.  Expired
leases from crashed processes are reclaimed on the next ``acquire`` and
by ``cleanup_expired_locks``.

    Lease flow::

        run A ── acquire(u-1) ──► token ── generate ── release(u-1, token)
        run B ── acquire(u-1) ──► None (held) ──► skip (LOCKED)
"""

from __future__ import annotations

import sqlite3
from datetime import timedelta
from uuid import uuid4

from ideagen.core.logging import get_logger
from ideagen.core.sqlite_conn import Connection
from ideagen.core.timestamps import utc_now

logger = get_logger(__name__)

DEFAULT_TTL_SECONDS = 300


def _lock_key(user_id: str) -> str:
    return f"user:{user_id}"


class LockManager:
    """Database-backed TTL leases.

    Example:
        >>> manager = LockManager(conn, instance_id="cron-1")
        >>> token = manager.acquire("u-1")
        >>> if token is not None:
        ...     try:
        ...         ...  # run generation
        ...     finally:
        ...         manager.release("u-1", token)
    """

    def __init__(
        self,
        conn: Connection,
        instance_id: str | None = None,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
    ) -> None:
        self.conn = conn
        self.instance_id = instance_id or str(uuid4())
        self.ttl_seconds = ttl_seconds

    def acquire(self, user_id: str, ttl_seconds: int | None = None) -> str | None:
        """Acquire the lease for ``user_id``.

        Returns:
            The lease token to pass to ``release``, or None if an unexpired
            lease already exists (whoever holds it) or the store failed
        """
        key = _lock_key(user_id)
        token = uuid4().hex
        now = utc_now()
        expires = now + timedelta(seconds=ttl_seconds or self.ttl_seconds)

        try:
            # Reclaim an expired lease for this user first
            self.conn.execute(
                "DELETE FROM schedule_locks WHERE lock_key = ? AND expires_at < ?",
                (key, now.isoformat()),
            )
            cursor = self.conn.execute(
                """
                INSERT OR IGNORE INTO schedule_locks
                    (lock_key, locked_by, lease_token, locked_at, expires_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (key, self.instance_id, token, now.isoformat(), expires.isoformat()),
            )
            self.conn.commit()
        except sqlite3.Error as e:
            logger.error("lock_acquire_failed", user_id=user_id, error=str(e))
            return None

        if cursor.rowcount > 0:
            logger.debug("lock_acquired", user_id=user_id, instance_id=self.instance_id)
            return token

        logger.debug("lock_held", user_id=user_id)
        return None

    def release(self, user_id: str, token: str) -> bool:
        """Release the lease identified by ``token``."""
        try:
            cursor = self.conn.execute(
                "DELETE FROM schedule_locks WHERE lock_key = ? AND lease_token = ?",
                (_lock_key(user_id), token),
            )
            self.conn.commit()
        except sqlite3.Error as e:
            logger.error("lock_release_failed", user_id=user_id, error=str(e))
            return False

        if cursor.rowcount > 0:
            logger.debug("lock_released", user_id=user_id)
            return True
        return False

    def is_locked(self, user_id: str) -> bool:
        """Check whether any instance holds an unexpired lease for the user."""
        return self.get_lock_holder(user_id) is not None

    def get_lock_holder(self, user_id: str) -> str | None:
        cursor = self.conn.execute(
            "SELECT locked_by FROM schedule_locks WHERE lock_key = ? AND expires_at > ?",
            (_lock_key(user_id), utc_now().isoformat()),
        )
        row = cursor.fetchone()
        return row[0] if row else None

    # === Maintenance ===

    def cleanup_expired_locks(self) -> int:
        """Remove all expired leases.

        Returns:
            Number of leases removed
        """
        cursor = self.conn.execute(
            "DELETE FROM schedule_locks WHERE expires_at < ?",
            (utc_now().isoformat(),),
        )
        self.conn.commit()
        count = cursor.rowcount
        if count > 0:
            logger.info("expired_locks_cleaned", count=count)
        return count

    def list_active_locks(self) -> list[dict]:
        """List all unexpired leases."""
        cursor = self.conn.execute(
            """
            SELECT lock_key, locked_by, locked_at, expires_at
            FROM schedule_locks
            WHERE expires_at > ?
            ORDER BY locked_at
            """,
            (utc_now().isoformat(),),
        )
        return [
            {
                "lock_key": row[0],
                "locked_by": row[1],
                "locked_at": row[2],
                "expires_at": row[3],
            }
            for row in cursor.fetchall()
        ]
