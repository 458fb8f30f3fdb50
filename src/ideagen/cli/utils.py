"""
CLI utility helpers: output formatting and connection management.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from ideagen.core.schema import open_database
from ideagen.core.settings import get_settings
from ideagen.core.sqlite_conn import SqliteConnection
from ideagen.ops.context import OperationContext
from ideagen.ops.result import OperationResult

console = Console()
err_console = Console(stderr=True)


# ── Connection helper ────────────────────────────────────────────────────


def get_connection(database: str | None = None) -> SqliteConnection:
    """Open (and initialise) the database.  Defaults to ``IDEAGEN_DATABASE_PATH``."""
    return open_database(database or get_settings().database_path)


def make_context(database: str | None = None) -> tuple[OperationContext, SqliteConnection]:
    """Create an ``OperationContext`` + connection pair for CLI commands."""
    conn = get_connection(database)
    ctx = OperationContext(conn=conn, settings=get_settings(), caller="cli")
    return ctx, conn


# ── Output helpers ───────────────────────────────────────────────────────


def _to_dict(obj: Any) -> dict[str, Any]:
    """Convert dataclass / pydantic model / dict to plain dict."""
    if hasattr(obj, "model_dump"):
        return obj.model_dump()
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if hasattr(obj, "__dataclass_fields__"):
        return asdict(obj)
    if isinstance(obj, dict):
        return obj
    return {"value": str(obj)}


def fail(result: OperationResult) -> None:
    """Print the error of a failed result and exit 1."""
    err = result.error
    msg = err.message if err else "Unknown error"
    code = err.code if err else "ERROR"
    err_console.print(f"[bold red]Error[/bold red] ({code}): {msg}")
    raise typer.Exit(code=1)


def output_result(
    result: OperationResult,
    *,
    as_json: bool = False,
    title: str = "",
) -> None:
    """Render an ``OperationResult`` to the terminal."""
    if not result.success:
        fail(result)

    data = result.data

    if as_json:
        payload = _to_dict(data) if not isinstance(data, list | tuple) else [_to_dict(d) for d in data]
        console.print_json(json.dumps(payload, default=str))
        return

    if isinstance(data, list):
        if not data:
            console.print("[dim]No items.[/dim]")
            return
        print_table(data, title=title)
    else:
        print_dict(_to_dict(data), title=title)


def print_table(items: list, *, title: str = "", columns: list[str] | None = None) -> None:
    """Render a list of dataclasses/dicts as a Rich table."""
    rows = [_to_dict(item) for item in items]
    columns = columns or list(rows[0])
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in columns:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*(str(row.get(col, "")) for col in columns))
    console.print(table)


def print_dict(data: dict[str, Any], *, title: str = "") -> None:
    """Render a single dict as key-value pairs."""
    if title:
        console.print(f"[bold]{title}[/bold]")
    for k, v in data.items():
        console.print(f"  [cyan]{k}[/cyan]: {v}")
