"""
Typed response objects for operations.

Responses carry only domain data: no HTTP status codes, no CLI formatting.
Schedule operations return :class:`AutoGenerationStatus`,
:class:`RunOutcome` and :class:`SweepResult` directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ideagen.notifications.store import Notification


@dataclass(frozen=True, slots=True)
class NotificationList:
    """Result payload for :func:`ideagen.ops.notifications.list_notifications`."""

    items: list[Notification] = field(default_factory=list)
    unread: int = 0


@dataclass(frozen=True, slots=True)
class NotificationsCleared:
    deleted: int = 0
