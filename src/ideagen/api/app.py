"""
FastAPI application factory.

``create_app()`` wires middleware, routers, error handlers and the
lifespan hook into a single ``FastAPI`` instance.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ideagen import __version__
from ideagen.api.errors import unhandled_exception_handler
from ideagen.api.middleware import RequestIDMiddleware, TimingMiddleware
from ideagen.core.logging import configure_logging, get_logger
from ideagen.core.schema import open_database
from ideagen.core.settings import IdeagenSettings, get_settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: configure logging and create the schema. Shutdown: log."""
    settings: IdeagenSettings = app.state.settings
    configure_logging(level=settings.log_level, json_format=settings.json_logs, service="ideagen-api")
    log = get_logger("ideagen.api")
    log.info("api_starting", version=__version__)

    conn = open_database(settings.database_path)
    conn.close()
    log.info("database_initialized", path=str(settings.database_path))

    if not settings.cron_secret:
        log.warning("cron_secret_missing", detail="cron endpoint will reject every request")

    yield
    log.info("api_shutting_down")


def create_app(settings: IdeagenSettings | None = None) -> FastAPI:
    """Build and return a fully-configured FastAPI application.

    Parameters
    ----------
    settings : IdeagenSettings | None
        Override settings (useful for testing).  When ``None`` the cached
        singleton from :func:`get_settings` is used.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=__version__,
        lifespan=lifespan,
        docs_url=f"{settings.api_prefix}/docs",
        openapi_url=f"{settings.api_prefix}/openapi.json",
    )
    app.state.settings = settings

    # Endpoints resolve the same settings the app was built with
    app.dependency_overrides[get_settings] = lambda: settings

    # ── Middleware (outermost → innermost) ────────────────────────────
    app.add_middleware(TimingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Exception handlers ───────────────────────────────────────────
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # ── Routers ──────────────────────────────────────────────────────
    from ideagen.api.routers import auto_generation, cron, notifications

    prefix = settings.api_prefix

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        return {"status": "ok", "service": "ideagen", "version": __version__}

    app.include_router(cron.router, prefix=prefix, tags=["cron"])
    app.include_router(auto_generation.router, prefix=prefix, tags=["auto-generation"])
    app.include_router(notifications.router, prefix=prefix, tags=["notifications"])

    return app
