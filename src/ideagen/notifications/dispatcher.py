"""
Notification dispatcher.

Fans one event out to every enabled channel concurrently.  Every channel
is attempted; a failing channel is recorded in its :class:`DeliveryResult`
and never stops the others or the caller.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from ideagen.core.logging import get_logger
from ideagen.core.settings import IdeagenSettings
from ideagen.core.sqlite_conn import Connection
from ideagen.notifications.channels import (
    ConsoleChannel,
    EmailChannel,
    InboxChannel,
    WebhookChannel,
)
from ideagen.notifications.events import NotificationEvent
from ideagen.notifications.protocol import DeliveryResult, NotificationChannel
from ideagen.notifications.store import NotificationRepository

logger = get_logger(__name__)


class NotificationDispatcher:
    """Delivers events to a set of channels (satisfies the ``Notifier`` protocol)."""

    def __init__(self, channels: Iterable[NotificationChannel] = ()) -> None:
        self._channels: dict[str, NotificationChannel] = {}
        for channel in channels:
            self.register(channel)

    def register(self, channel: NotificationChannel) -> None:
        if channel.name in self._channels:
            raise ValueError(f"Channel {channel.name!r} is already registered")
        self._channels[channel.name] = channel

    def unregister(self, name: str) -> bool:
        return self._channels.pop(name, None) is not None

    def get(self, name: str) -> NotificationChannel | None:
        return self._channels.get(name)

    @property
    def channels(self) -> list[NotificationChannel]:
        return list(self._channels.values())

    async def dispatch(self, event: NotificationEvent) -> list[DeliveryResult]:
        """Send ``event`` to every channel that accepts it."""
        targets = [c for c in self._channels.values() if c.should_send(event)]
        if not targets:
            return []

        outcomes = await asyncio.gather(
            *(channel.send(event) for channel in targets),
            return_exceptions=True,
        )

        results: list[DeliveryResult] = []
        for channel, outcome in zip(targets, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                outcome = DeliveryResult.fail(channel.name, outcome)
            if not outcome.success:
                logger.warning(
                    "notification_delivery_failed",
                    channel=channel.name,
                    user_id=event.user_id,
                    kind=event.kind.value,
                    error=outcome.message,
                )
            results.append(outcome)

        logger.debug(
            "notification_dispatched",
            user_id=event.user_id,
            kind=event.kind.value,
            delivered=sum(1 for r in results if r.success),
            failed=sum(1 for r in results if not r.success),
        )
        return results

    async def notify(self, event: NotificationEvent) -> None:
        await self.dispatch(event)


def create_dispatcher(
    conn: Connection,
    settings: IdeagenSettings,
    *,
    console: bool = False,
) -> NotificationDispatcher:
    """Build the dispatcher for the configured channels.

    The inbox is always on; email needs ``smtp_host`` and push needs
    ``webhook_url``.
    """
    channels: list[NotificationChannel] = [InboxChannel(NotificationRepository(conn))]

    if settings.smtp_host:
        channels.append(
            EmailChannel(
                settings.smtp_host,
                settings.email_from,
                smtp_port=settings.smtp_port,
                smtp_user=settings.smtp_user,
                smtp_password=settings.smtp_password,
                use_tls=settings.smtp_use_tls,
                app_url=settings.app_url,
            )
        )

    if settings.webhook_url:
        channels.append(WebhookChannel(settings.webhook_url))

    if console:
        channels.append(ConsoleChannel())

    return NotificationDispatcher(channels)
