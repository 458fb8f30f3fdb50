"""
CLI ``ideagen schedule``: per-user auto-generation settings and manual runs.
"""

from __future__ import annotations

import asyncio

import typer

from ideagen.cli.utils import console, fail, make_context, output_result
from ideagen.scheduling.intervals import DEFAULT_INTERVAL, DEFAULT_TIMEZONE, INTERVAL_CHOICES

app = typer.Typer(no_args_is_help=True)


@app.command("configure")
def configure(
    user_id: str = typer.Argument(..., help="User ID"),
    interval: str = typer.Option(
        DEFAULT_INTERVAL, "--interval", "-i", help=f"One of: {', '.join(INTERVAL_CHOICES)}"
    ),
    time: str | None = typer.Option(None, "--time", "-t", help="HH:MM for daily/weekly"),
    timezone: str = typer.Option(DEFAULT_TIMEZONE, "--timezone", "--tz", help="IANA timezone"),
    day_of_week: str | None = typer.Option(
        None, "--day", help="Weekday for weekly (0-6 or name); defaults to the first trigger's"
    ),
    email: str | None = typer.Option(None, "--email", help="Address for email notifications"),
    enabled: bool = typer.Option(True, "--enable/--disable"),
    paused: bool = typer.Option(False, "--paused", help="Create the schedule paused"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Enable, reconfigure or disable auto-generation for a user."""
    from ideagen.ops.auto_generation import update_auto_generation_settings
    from ideagen.ops.requests import UpdateAutoGenerationRequest

    ctx, _ = make_context(database)
    request = UpdateAutoGenerationRequest(
        user_id=user_id,
        enabled=enabled,
        interval=interval,
        time=time,
        timezone=timezone,
        day_of_week=day_of_week,
        paused=paused,
        notification_email=email,
    )
    result = update_auto_generation_settings(ctx, request)
    output_result(result, as_json=json_out, title=f"Auto-generation: {user_id}")


@app.command("status")
def status(
    user_id: str = typer.Argument(..., help="User ID"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Show the user's schedule and countdown."""
    from ideagen.ops.auto_generation import get_auto_generation_status

    ctx, _ = make_context(database)
    result = get_auto_generation_status(ctx, user_id)
    output_result(result, as_json=json_out, title=f"Auto-generation: {user_id}")


@app.command("pause")
def pause(
    user_id: str = typer.Argument(..., help="User ID"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Freeze the countdown; the sweep skips the user until resumed."""
    from ideagen.ops.auto_generation import pause_auto_generation

    ctx, _ = make_context(database)
    output_result(pause_auto_generation(ctx, user_id), as_json=json_out, title="Paused")


@app.command("resume")
def resume(
    user_id: str = typer.Argument(..., help="User ID"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Resume a paused schedule (next trigger unchanged)."""
    from ideagen.ops.auto_generation import resume_auto_generation

    ctx, _ = make_context(database)
    output_result(resume_auto_generation(ctx, user_id), as_json=json_out, title="Resumed")


@app.command("trigger")
def trigger(
    user_id: str = typer.Argument(..., help="User ID"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Generate a trade idea for the user now."""
    from ideagen.ops.auto_generation import trigger_auto_generation

    ctx, _ = make_context(database)
    result = asyncio.run(trigger_auto_generation(ctx, user_id))
    if not result.success:
        fail(result)
    outcome = result.data
    if json_out:
        output_result(result, as_json=True)
        return
    console.print(f"[bold green]Generated[/bold green] trade idea for {user_id}")
    if outcome and outcome.next_trigger:
        console.print(f"  Next generation: {outcome.next_trigger.isoformat()}")
