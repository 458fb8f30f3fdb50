"""Trade-idea generator clients.

``HttpTradeIdeaGenerator`` calls the idea-generation service over HTTP::

    POST {generator_url}
    {"user_id": "u-1"}

    200 {"success": true,  "data": {"direction": "BUY", "currency_pair": "EUR/USD", ...}}
    200 {"success": false, "error": "Weekly trade limit reached"}

Business failures (quota reached), HTTP errors and timeouts all map to a
failed :class:`GenerationResult`; the client itself never raises for a
remote problem.
"""

from __future__ import annotations

from typing import Any

import httpx

from ideagen.core.errors import ConfigError
from ideagen.core.logging import get_logger
from ideagen.core.settings import IdeagenSettings
from ideagen.scheduling.protocol import GenerationResult

logger = get_logger(__name__)


class HttpTradeIdeaGenerator:
    """Generator backed by the idea-generation HTTP service.

    Args:
        url: Endpoint receiving the POST
        timeout: Request timeout in seconds
        api_key: Sent as ``Authorization: Bearer <api_key>`` when set
        client: Pre-built ``httpx.AsyncClient`` (tests pass one with a
            ``MockTransport``); when omitted a client is opened per call
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 120.0,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.api_key = api_key
        self._client = client

    @classmethod
    def from_settings(cls, settings: IdeagenSettings) -> HttpTradeIdeaGenerator:
        return cls(
            settings.generator_url or "",
            timeout=settings.generator_timeout_seconds,
            api_key=settings.generator_api_key,
        )

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def generate(self, user_id: str) -> GenerationResult:
        if not self.url:
            raise ConfigError("Trade-idea generator URL is not configured (IDEAGEN_GENERATOR_URL)")
        try:
            if self._client is not None:
                response = await self._post(self._client, user_id)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await self._post(client, user_id)
        except httpx.TimeoutException:
            logger.warning("generator_timeout", user_id=user_id, timeout=self.timeout)
            return GenerationResult.fail(f"Trade idea generation timed out after {self.timeout:g}s")
        except httpx.HTTPError as e:
            logger.warning("generator_unreachable", user_id=user_id, error=str(e))
            return GenerationResult.fail(f"Trade idea service unavailable: {e}")

        return self._parse(response)

    async def _post(self, client: httpx.AsyncClient, user_id: str) -> httpx.Response:
        return await client.post(
            self.url,
            json={"user_id": user_id},
            headers=self._headers(),
            timeout=self.timeout,
        )

    def _parse(self, response: httpx.Response) -> GenerationResult:
        try:
            body: Any = response.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            if response.is_success:
                return GenerationResult.fail("Trade idea service returned an invalid response")
            return GenerationResult.fail(f"Trade idea service returned HTTP {response.status_code}")

        if response.is_success and body.get("success", False):
            data = body.get("data")
            return GenerationResult.ok(data if isinstance(data, dict) else {})

        error = body.get("error") or body.get("detail") or body.get("message")
        if not error:
            error = f"Trade idea service returned HTTP {response.status_code}"
        return GenerationResult.fail(str(error))
