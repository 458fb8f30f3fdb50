"""
User notifications for auto-generation.

Events are built in :mod:`ideagen.notifications.events` and delivered by
:class:`NotificationDispatcher` to the inbox, email, webhook and console
channels.
"""

from ideagen.notifications.base import BaseChannel
from ideagen.notifications.dispatcher import NotificationDispatcher, create_dispatcher
from ideagen.notifications.events import (
    EventKind,
    NotificationEvent,
    final_failure_event,
    retry_event,
    success_event,
)
from ideagen.notifications.protocol import ChannelType, DeliveryResult, NotificationChannel
from ideagen.notifications.store import Notification, NotificationRepository

__all__ = [
    "BaseChannel",
    "ChannelType",
    "DeliveryResult",
    "EventKind",
    "Notification",
    "NotificationChannel",
    "NotificationDispatcher",
    "NotificationEvent",
    "NotificationRepository",
    "create_dispatcher",
    "final_failure_event",
    "retry_event",
    "success_event",
]
