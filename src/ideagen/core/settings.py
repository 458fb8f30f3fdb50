"""
Centralized settings for ideagen.

All fields can be set through ``IDEAGEN_*`` environment variables (e.g.
``IDEAGEN_CRON_SECRET``) or a ``.env`` file in the working directory.

Examples:
    >>> from ideagen.core.settings import IdeagenSettings
    >>> IdeagenSettings(max_retries=3).retry_delay.total_seconds()
    3600.0
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class IdeagenSettings(BaseSettings):
    """Runtime configuration for the scheduler, notifications and transports."""

    model_config = SettingsConfigDict(
        env_prefix="IDEAGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Storage ──────────────────────────────────────────────────
    database_path: Path = Field(
        default_factory=lambda: Path.home() / ".ideagen" / "ideagen.db",
        description="SQLite database file holding schedules, locks and notifications",
    )

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="auto", description="auto | json | console")

    # ── Retry policy ─────────────────────────────────────────────
    max_retries: int = Field(default=2, ge=0)
    retry_delay_seconds: int = Field(default=3600, gt=0)

    # ── Per-user lease ───────────────────────────────────────────
    lock_ttl_seconds: int = Field(default=300, gt=0)
    instance_id: str | None = Field(default=None)

    # ── Trade-idea generator ─────────────────────────────────────
    generator_url: str | None = Field(default=None)
    generator_timeout_seconds: float = Field(default=120.0, gt=0)
    generator_api_key: str | None = Field(default=None)

    # ── Cron endpoint ────────────────────────────────────────────
    cron_secret: str | None = Field(default=None)

    # ── Email channel (enabled when smtp_host is set) ────────────
    smtp_host: str | None = Field(default=None)
    smtp_port: int = Field(default=587)
    smtp_user: str | None = Field(default=None)
    smtp_password: str | None = Field(default=None)
    smtp_use_tls: bool = Field(default=True)
    email_from: str = Field(default="ideagen <noreply@localhost>")

    # ── Push/webhook channel (enabled when webhook_url is set) ───
    webhook_url: str | None = Field(default=None)

    # ── Links rendered in notifications ──────────────────────────
    app_url: str = Field(default="http://localhost:3000")

    # ── API ──────────────────────────────────────────────────────
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=12100)
    api_prefix: str = Field(default="/api/v1")
    api_title: str = Field(default="ideagen API")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("auto", "json", "console"):
            raise ValueError("log_format must be one of: auto, json, console")
        return value

    @property
    def retry_delay(self) -> timedelta:
        return timedelta(seconds=self.retry_delay_seconds)

    @property
    def json_logs(self) -> bool | None:
        """Map ``log_format`` onto ``configure_logging(json_format=...)``."""
        if self.log_format == "auto":
            return None
        return self.log_format == "json"


@lru_cache(maxsize=1)
def get_settings() -> IdeagenSettings:
    """Cached settings, loaded once per process."""
    return IdeagenSettings()
