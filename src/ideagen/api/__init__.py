"""FastAPI application (cron endpoint, per-user auto-generation, inbox)."""

from ideagen.api.app import create_app

__all__ = ["create_app"]
