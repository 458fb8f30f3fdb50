"""
FastAPI dependency injection: settings, per-request connection and
operation context.

Usage in routers::

    from ideagen.api.deps import OpContext

    @router.get("/users/{user_id}/auto-generation")
    def get_status(ctx: OpContext, user_id: str):
        ...

Tests override :func:`get_connection` (shared in-memory database) and
:func:`get_scheduler` (service with a fake generator) through
``app.dependency_overrides``.
"""

from __future__ import annotations

import uuid
from collections.abc import Generator
from typing import Annotated

from fastapi import Depends, Request

from ideagen.core.schema import open_database
from ideagen.core.settings import IdeagenSettings, get_settings
from ideagen.core.sqlite_conn import Connection
from ideagen.ops.context import OperationContext
from ideagen.scheduling.service import AutoGenerationService

# ── Database connection (per-request) ────────────────────────────────────


def get_connection(
    settings: Annotated[IdeagenSettings, Depends(get_settings)],
) -> Generator[Connection, None, None]:
    """Yield a database connection for the request lifespan."""
    conn = open_database(settings.database_path)
    try:
        yield conn
    finally:
        conn.close()


def get_scheduler() -> AutoGenerationService | None:
    """Pre-built service; ``None`` lets the context build one from settings."""
    return None


# ── Operation context (per-request) ──────────────────────────────────────


def get_operation_context(
    request: Request,
    conn: Annotated[Connection, Depends(get_connection)],
    settings: Annotated[IdeagenSettings, Depends(get_settings)],
    scheduler: Annotated[AutoGenerationService | None, Depends(get_scheduler)],
) -> OperationContext:
    """Build an :class:`OperationContext` from the current request."""
    request_id = getattr(request.state, "request_id", str(uuid.uuid4()))
    return OperationContext(
        conn=conn,
        settings=settings,
        request_id=request_id,
        caller="api",
        scheduler=scheduler,
    )


# ── Convenience type aliases ─────────────────────────────────────────────

Settings = Annotated[IdeagenSettings, Depends(get_settings)]
OpContext = Annotated[OperationContext, Depends(get_operation_context)]
