"""
CLI ``ideagen serve``: start the API server.
"""

from __future__ import annotations

import typer
import uvicorn

from ideagen.cli.utils import console
from ideagen.core.settings import get_settings


def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Bind address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on changes"),
    workers: int = typer.Option(1, "--workers", "-w", help="Number of workers"),
    log_level: str = typer.Option("info", "--log-level"),
) -> None:
    """Start the ideagen REST API (cron endpoint, settings, inbox)."""
    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    console.print(f"[bold green]Starting ideagen API[/bold green] on {host}:{port}")
    uvicorn.run(
        "ideagen.api:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_level=log_level,
    )
