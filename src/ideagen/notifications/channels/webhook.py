"""Push/webhook notification channel.

POSTs the event as JSON to a push gateway (or any HTTP endpoint) so the
mobile/desktop push provider can fan it out.
"""

from __future__ import annotations

from typing import Any

import httpx

from ideagen.core.errors import NotificationError
from ideagen.notifications.base import BaseChannel
from ideagen.notifications.events import NotificationEvent
from ideagen.notifications.protocol import ChannelType, DeliveryResult


class WebhookChannel(BaseChannel):
    """
    Generic webhook channel.

    POSTs ``event.to_dict()`` to a URL.
    """

    def __init__(
        self,
        url: str,
        *,
        name: str = "webhook",
        headers: dict[str, str] | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
        **kwargs: Any,
    ):
        super().__init__(name, ChannelType.WEBHOOK, **kwargs)
        self._url = url
        self._headers = headers or {}
        self._timeout = timeout
        self._client = client

    async def send(self, event: NotificationEvent) -> DeliveryResult:
        """Send the event to the webhook."""
        headers = {"Content-Type": "application/json"}
        headers.update(self._headers)
        payload = event.to_dict()

        try:
            if self._client is not None:
                response = await self._client.post(self._url, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(self._url, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPError as e:
            return DeliveryResult.fail(
                self._name, NotificationError(str(e), cause=e).with_context(channel=self._name)
            )

        return DeliveryResult.ok(self._name, response={"status": response.status_code})
