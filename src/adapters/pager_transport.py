"""HTTP pager delivery adapter.

Sends one message to one pager destination with a single POST. The pager
channel has a hard character limit, so truncation happens here at the
transport boundary rather than in the core formatter.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from core.models import DeliveryResult

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_CHARS = 240


def truncate(message: str, max_chars: int) -> str:
    """Clip a message to the transport limit."""

    if len(message) <= max_chars:
        return message
    return message[:max_chars].rstrip()


class PagerTransport:
    """Transport adapter that POSTs JSON to a pager gateway."""

    def __init__(
        self,
        api_url: str,
        api_key: Optional[str] = None,
        max_chars: int = DEFAULT_MAX_CHARS,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_url = api_url
        self._api_key = api_key
        self._max_chars = max_chars
        self._timeout = timeout_seconds
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def send(self, destination: str, message: str) -> DeliveryResult:
        """Send the message; failures are returned, never raised."""

        payload = {"to": destination, "message": truncate(message, self._max_chars)}
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                response = await client.post(self._api_url, json=payload, headers=self._headers())
        except httpx.HTTPError as exc:
            return DeliveryResult(success=False, error=f"Pager request failed: {exc}")

        if response.is_success:
            return DeliveryResult(success=True)

        body = response.text[:200]
        LOGGER.debug("Pager gateway rejected message: %s %s", response.status_code, body)
        return DeliveryResult(success=False, error=f"Pager API error {response.status_code}: {body}")
