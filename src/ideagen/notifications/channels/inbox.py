"""In-app inbox channel: stores the event in the ``notifications`` table."""

from __future__ import annotations

from typing import Any

from ideagen.core.errors import PersistenceError
from ideagen.notifications.base import BaseChannel
from ideagen.notifications.events import NotificationEvent
from ideagen.notifications.protocol import ChannelType, DeliveryResult
from ideagen.notifications.store import NotificationRepository


class InboxChannel(BaseChannel):
    """Persist every event so the bell icon can list it."""

    def __init__(self, store: NotificationRepository, name: str = "inbox", **kwargs: Any):
        super().__init__(name, ChannelType.INBOX, **kwargs)
        self._store = store

    async def send(self, event: NotificationEvent) -> DeliveryResult:
        try:
            notification = self._store.add(event)
        except PersistenceError as e:
            return DeliveryResult.fail(self._name, e)
        return DeliveryResult.ok(self._name, response={"id": notification.id})
