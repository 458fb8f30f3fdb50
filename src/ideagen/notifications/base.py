"""
Notification channel base class.

Provides common functionality for channel implementations:
- Event-kind filtering
- Enable/disable
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from ideagen.notifications.events import EventKind, NotificationEvent
from ideagen.notifications.protocol import ChannelType, DeliveryResult


class BaseChannel(ABC):
    """
    Base class for notification channels.

    Args:
        name: Unique channel name
        channel_type: Channel classification
        kinds: Event kinds this channel accepts (None means all)
        enabled: Initial enabled state
    """

    def __init__(
        self,
        name: str,
        channel_type: ChannelType,
        *,
        kinds: Iterable[EventKind] | None = None,
        enabled: bool = True,
    ):
        self._name = name
        self._channel_type = channel_type
        self._kinds = frozenset(kinds) if kinds is not None else None
        self._enabled = enabled

    @property
    def name(self) -> str:
        return self._name

    @property
    def channel_type(self) -> ChannelType:
        return self._channel_type

    @property
    def enabled(self) -> bool:
        return self._enabled

    def enable(self) -> None:
        """Enable the channel."""
        self._enabled = True

    def disable(self) -> None:
        """Disable the channel."""
        self._enabled = False

    def should_send(self, event: NotificationEvent) -> bool:
        """Check if the event should go to this channel."""
        if not self._enabled:
            return False
        if self._kinds is not None and event.kind not in self._kinds:
            return False
        return True

    @abstractmethod
    async def send(self, event: NotificationEvent) -> DeliveryResult:
        """Deliver the event."""
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self._name!r}, enabled={self._enabled})"
