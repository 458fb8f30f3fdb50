"""Concrete notification channel implementations."""

from ideagen.notifications.channels.console import ConsoleChannel
from ideagen.notifications.channels.email import EmailChannel
from ideagen.notifications.channels.inbox import InboxChannel
from ideagen.notifications.channels.webhook import WebhookChannel

__all__ = [
    "ConsoleChannel",
    "EmailChannel",
    "InboxChannel",
    "WebhookChannel",
]
