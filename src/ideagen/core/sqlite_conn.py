"""SQLite connection adapter.

Wraps a raw :class:`sqlite3.Connection` to satisfy the :class:`Connection`
protocol used by the repositories.  A single cursor is kept so that
``execute`` / ``fetchone`` / ``fetchall`` operate on the same result set.

Usage::

    from ideagen.core.sqlite_conn import SqliteConnection

    conn = SqliteConnection(":memory:")
    conn.execute("SELECT 1")
    conn.fetchone()
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Connection(Protocol):
    """Minimal synchronous database connection contract."""

    def execute(self, sql: str, params: tuple = ()) -> Any: ...

    def fetchone(self) -> Any: ...

    def fetchall(self) -> list: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


class SqliteConnection:
    """Adapter: ``sqlite3.Connection`` → ``Connection`` protocol."""

    def __init__(self, path: str | Path = ":memory:", *, row_factory: Any = sqlite3.Row) -> None:
        path = str(path)
        if path != ":memory:":
            Path(path).expanduser().parent.mkdir(parents=True, exist_ok=True)
            path = str(Path(path).expanduser())
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = row_factory
        self._cursor = self._conn.cursor()

    # -- Connection protocol -----------------------------------------------

    def execute(self, sql: str, params: tuple | list = ()) -> Any:
        self._cursor.execute(sql, tuple(params))
        return self._cursor

    def executescript(self, script: str) -> None:
        self._conn.executescript(script)

    def fetchone(self) -> Any:
        return self._cursor.fetchone()

    def fetchall(self) -> list:
        return self._cursor.fetchall()

    def commit(self) -> None:
        self._conn.commit()

    def rollback(self) -> None:
        self._conn.rollback()

    def close(self) -> None:
        self._conn.close()

    # -- convenience -------------------------------------------------------

    @property
    def raw(self) -> sqlite3.Connection:
        """Access the underlying ``sqlite3.Connection`` (e.g. for pragmas)."""
        return self._conn

    def __repr__(self) -> str:
        return f"SqliteConnection({self._conn!r})"
