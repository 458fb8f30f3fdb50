"""
Typed request objects for operations.

Each dataclass represents the *input* contract for a single operation.
The API and CLI build these from their own arguments.
"""

from __future__ import annotations

from dataclasses import dataclass

from ideagen.scheduling.intervals import DEFAULT_INTERVAL, DEFAULT_TIMEZONE

# ------------------------------------------------------------------ #
# Auto-generation
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class UpdateAutoGenerationRequest:
    """Input for :func:`ideagen.ops.auto_generation.update_auto_generation_settings`."""

    user_id: str = ""
    enabled: bool = True
    interval: str = DEFAULT_INTERVAL
    time: str | None = None
    timezone: str = DEFAULT_TIMEZONE
    day_of_week: int | str | None = None
    paused: bool = False
    notification_email: str | None = None


@dataclass(frozen=True, slots=True)
class SetPausedRequest:
    user_id: str = ""
    paused: bool = True


# ------------------------------------------------------------------ #
# Notifications
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class ListNotificationsRequest:
    user_id: str = ""
    limit: int = 50
    unread_only: bool = False


@dataclass(frozen=True, slots=True)
class NotificationRequest:
    """Targets one notification of one user (mark read, delete)."""

    user_id: str = ""
    notification_id: str = ""
