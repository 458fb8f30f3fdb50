"""
ideagen: scheduled trade-idea generation.

Computes when each user's next trade idea is due, drives the external
generator for every due user, and keeps the per-user schedule moving
forward (normal cadence after success, bounded retries after failure).

Sub-packages::

    ideagen.core           errors, logging, settings, timestamps, sqlite
    ideagen.scheduling     trigger calculator, retry policy, orchestrator, sweep
    ideagen.notifications  events, channels, dispatcher
    ideagen.ops            user-facing operations returning OperationResult
    ideagen.cli            Typer CLI (``ideagen``)
    ideagen.api            FastAPI app (cron endpoint, manual trigger)
"""

__version__ = "0.3.0"
