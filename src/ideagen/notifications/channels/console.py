"""Console notification channel for development and testing."""

from __future__ import annotations

from typing import Any

from rich.console import Console

from ideagen.notifications.base import BaseChannel
from ideagen.notifications.events import EventKind, NotificationEvent
from ideagen.notifications.protocol import ChannelType, DeliveryResult

_STYLES = {
    EventKind.SUCCESS: "green",
    EventKind.RETRY: "yellow",
    EventKind.FAILURE: "red",
}


class ConsoleChannel(BaseChannel):
    """Prints events to the terminal."""

    def __init__(
        self,
        name: str = "console",
        *,
        console: Console | None = None,
        **kwargs: Any,
    ):
        super().__init__(name, ChannelType.CONSOLE, **kwargs)
        self._console = console or Console(stderr=True)

    async def send(self, event: NotificationEvent) -> DeliveryResult:
        style = _STYLES.get(event.kind, "blue")
        self._console.print(f"[bold {style}]{event.title}[/bold {style}] [dim]({event.user_id})[/dim]")
        self._console.print(f"  {event.message}")
        return DeliveryResult.ok(self._name)
