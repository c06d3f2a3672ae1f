"""Telegram Bot API delivery adapter.

Uses the Bot API for delivery so NOTAMs can be routed to a bot chat instead
of a pager gateway. The destination is the target chat id.
"""

from __future__ import annotations

from typing import Optional

import httpx

from adapters.pager_transport import truncate
from core.models import DeliveryResult

TELEGRAM_MAX_CHARS = 4096


class TelegramBotTransport:
    """Transport adapter that sends messages via the Telegram Bot API."""

    def __init__(
        self,
        bot_token: str,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._bot_token = bot_token
        self._timeout = timeout_seconds
        self._transport = transport

    def _endpoint(self) -> str:
        # The Bot API endpoint is deterministic and derived from the token.
        return f"https://api.telegram.org/bot{self._bot_token}/sendMessage"

    async def send(self, destination: str, message: str) -> DeliveryResult:
        """Send plain text to the chat; failures are returned, never raised."""

        payload = {
            "chat_id": destination,
            "text": truncate(message, TELEGRAM_MAX_CHARS),
            "disable_web_page_preview": True,
        }
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                response = await client.post(self._endpoint(), json=payload)
        except httpx.HTTPError as exc:
            # The token is part of the URL; keep it out of the error text.
            return DeliveryResult(success=False, error=f"Bot API request failed: {exc.__class__.__name__}")

        if response.is_success:
            return DeliveryResult(success=True)
        body = response.text[:200]
        return DeliveryResult(success=False, error=f"Bot API error {response.status_code}: {body}")
