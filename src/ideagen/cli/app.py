"""
Root Typer application for the ideagen CLI.

Sub-commands import their operations lazily so that ``ideagen --help``
stays fast.
"""

from __future__ import annotations

import typer
from typer import Typer

from ideagen.core.logging import configure_logging
from ideagen.core.settings import get_settings

app = Typer(
    name="ideagen",
    help="ideagen: scheduled trade-idea generation.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from ideagen import __version__

        typer.echo(f"ideagen {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str = typer.Option(
        "WARNING", "--log-level", envvar="IDEAGEN_CLI_LOG_LEVEL", help="Log level for CLI commands."
    ),
) -> None:
    """ideagen CLI: manage auto-generation schedules, sweeps and notifications."""
    configure_logging(level=log_level, json_format=get_settings().json_logs)


# ── Sub-command registration ─────────────────────────────────────────────

from ideagen.cli.notifications import app as notifications_app  # noqa: E402
from ideagen.cli.schedule import app as schedule_app  # noqa: E402
from ideagen.cli.serve import serve  # noqa: E402
from ideagen.cli.sweep import sweep  # noqa: E402

app.add_typer(schedule_app, name="schedule", help="Per-user auto-generation schedules.")
app.add_typer(notifications_app, name="notifications", help="Notification inbox.")
app.command("sweep")(sweep)
app.command("serve")(serve)


if __name__ == "__main__":
    app()
