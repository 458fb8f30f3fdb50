"""
Notification channel protocol and delivery result.

Concrete channels live in ``channels/``; shared behaviour (kind filter,
enable/disable) is in ``base.py``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from ideagen.core.timestamps import utc_now
from ideagen.notifications.events import NotificationEvent


class ChannelType(str, Enum):
    """Notification channel types."""

    INBOX = "inbox"
    EMAIL = "email"
    WEBHOOK = "webhook"
    CONSOLE = "console"  # For development


@dataclass
class DeliveryResult:
    """Result of one delivery attempt to one channel."""

    channel_name: str
    success: bool
    message: str | None = None
    response: dict[str, Any] | None = None
    error: Exception | None = None
    delivered_at: datetime = field(default_factory=utc_now)

    @classmethod
    def ok(cls, channel_name: str, message: str | None = None, **kwargs: Any) -> DeliveryResult:
        return cls(channel_name=channel_name, success=True, message=message, **kwargs)

    @classmethod
    def fail(cls, channel_name: str, error: Exception) -> DeliveryResult:
        return cls(
            channel_name=channel_name,
            success=False,
            error=error,
            message=str(error),
        )


@runtime_checkable
class NotificationChannel(Protocol):
    """Protocol for notification channels."""

    @property
    def name(self) -> str: ...

    @property
    def channel_type(self) -> ChannelType: ...

    @property
    def enabled(self) -> bool: ...

    def should_send(self, event: NotificationEvent) -> bool: ...

    async def send(self, event: NotificationEvent) -> DeliveryResult: ...


__all__ = [
    "ChannelType",
    "DeliveryResult",
    "NotificationChannel",
]
