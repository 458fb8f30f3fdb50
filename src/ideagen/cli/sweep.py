"""
CLI ``ideagen sweep``: process every due schedule once (for system cron).
"""

from __future__ import annotations

import asyncio
import json

import typer

from ideagen.cli.utils import console, fail, make_context


def sweep(
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Run one sweep over all due schedules."""
    from ideagen.ops.auto_generation import process_due_schedules

    ctx, _ = make_context(database)
    ctx.caller = "cron"
    result = asyncio.run(process_due_schedules(ctx))
    if not result.success:
        fail(result)

    summary = result.data
    if json_out:
        console.print_json(json.dumps(summary.to_dict(), default=str))
        return

    console.print(
        f"[bold]Sweep complete[/bold]: "
        f"[green]{summary.processed} processed[/green], "
        f"[red]{summary.errors} errors[/red], "
        f"[yellow]{summary.skipped} skipped[/yellow] "
        f"[dim]({summary.due} due)[/dim]"
    )
    for failure in summary.failures:
        console.print(f"  [red]✗[/red] {failure['user_id']}: {failure['error']}")
