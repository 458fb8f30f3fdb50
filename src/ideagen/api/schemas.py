"""
API schemas: the success envelope, RFC 7807 errors and response models.

Every endpoint returns either :class:`SuccessResponse` or
:class:`ProblemDetail` (4xx/5xx), except the cron endpoint which keeps
the flat ``{success, processed, errors, skipped, timestamp}`` body its
callers expect.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


# ── RFC 7807 Problem Detail ─────────────────────────────────────────────


class ErrorDetail(BaseModel):
    code: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    field: str | None = Field(default=None, description="Field path if error is field-specific")


class ProblemDetail(BaseModel):
    """RFC 7807 «Problem Details for HTTP APIs».

    Error Codes:
        - ``VALIDATION_FAILED`` / ``INVALID_SCHEDULE`` (400)
        - ``UNAUTHORIZED`` (401)
        - ``NOT_FOUND`` (404)
        - ``NOT_ENABLED`` / ``PAUSED`` / ``CONCURRENCY_CONFLICT`` (409)
        - ``LOCKED`` (423)
        - ``GENERATION_FAILED`` (502)
        - ``CONFIG_ERROR`` (503)
        - ``PERSISTENCE_FAILED`` / ``INTERNAL`` (500)
    """

    type: str = Field(default="about:blank", description="Error type URI")
    title: str = Field(description="Short human-readable error summary")
    status: int = Field(description="HTTP status code")
    detail: str = Field(default="", description="Human-readable explanation of the error")
    instance: str = Field(default="", description="URI of the failing request")
    code: str = Field(default="", description="Machine-readable ops error code")
    errors: list[ErrorDetail] = Field(default_factory=list)


# ── Success envelope ────────────────────────────────────────────────────


class SuccessResponse(BaseModel, Generic[T]):
    data: T = Field(description="Response payload (type varies by endpoint)")
    elapsed_ms: float = Field(default=0.0, description="Server-side processing time in milliseconds")
    warnings: list[str] = Field(default_factory=list)


# ── Domain schemas ──────────────────────────────────────────────────────


class AutoGenerationStatusSchema(BaseModel):
    """Dashboard view of a user's schedule."""

    enabled: bool = False
    interval: str = "weekly"
    time: str | None = None
    timezone: str = "UTC"
    day_of_week: int | None = None
    paused: bool = False
    next_generation: datetime | None = None
    last_generation: datetime | None = None
    retry_count: int = 0
    last_error: str | None = None
    time_left: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class RunOutcomeSchema(BaseModel):
    user_id: str
    success: bool
    state: str
    error: str | None = None
    code: str | None = None
    next_trigger: datetime | None = None
    retry_count: int = 0
    will_retry: bool = False


class NotificationSchema(BaseModel):
    id: str
    type: str
    title: str
    message: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    read: bool = False
    created_at: datetime | None = None


class NotificationListSchema(BaseModel):
    items: list[NotificationSchema] = Field(default_factory=list)
    unread: int = 0


class CronResponse(BaseModel):
    """Body of ``{prefix}/cron/auto-generation``."""

    success: bool
    processed: int = 0
    errors: int = 0
    skipped: int = 0
    timestamp: datetime
    error: str | None = None
