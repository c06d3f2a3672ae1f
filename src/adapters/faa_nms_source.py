"""FAA NOTAM Management Service (REST API) source adapter."""

from __future__ import annotations

import logging
from typing import List, Optional

import httpx

from adapters.notam_records import build_notices, pick_notam_list
from core.models import Notice
from core.ports import SourceError

LOGGER = logging.getLogger(__name__)

DEFAULT_KEY_HEADER = "x-api-key"


class FaaNmsSource:
    """Source adapter that queries the authenticated FAA NMS REST API."""

    def __init__(
        self,
        api_url: str,
        api_key: Optional[str] = None,
        api_key_header: str = DEFAULT_KEY_HEADER,
        timeout_seconds: float = 15.0,
        max_results: int = 200,
        retries: int = 2,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_url = api_url
        self._api_key = api_key
        self._api_key_header = api_key_header
        self._timeout = timeout_seconds
        self._max_results = max_results
        self._retries = retries
        self._transport = transport

    def _params(self, location_code: str) -> dict[str, str]:
        # Query values baked into the configured URL take precedence.
        existing = httpx.URL(self._api_url).params
        params: dict[str, str] = {}
        if "location" not in existing:
            params["location"] = location_code
        if "maxResults" not in existing:
            params["maxResults"] = str(self._max_results)
        return params

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._api_key:
            headers[self._api_key_header] = self._api_key
        return headers

    async def fetch(self, location_code: str) -> List[Notice]:
        """Fetch and normalize NOTAMs for one location."""

        try:
            # Retries cover connection failures only; HTTP errors are not retried.
            transport = self._transport or httpx.AsyncHTTPTransport(retries=self._retries)
            async with httpx.AsyncClient(transport=transport, timeout=self._timeout) as client:
                response = await client.get(
                    self._api_url,
                    params=self._params(location_code),
                    headers=self._headers(),
                )
        except httpx.HTTPError as exc:
            raise SourceError(f"FAA NMS request failed: {exc}") from exc

        if response.status_code < 200 or response.status_code >= 300:
            raise SourceError(f"FAA NMS API responded with {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise SourceError("FAA NMS API returned invalid JSON") from exc

        records = pick_notam_list(payload)
        if records is None:
            raise SourceError("Unexpected NOTAM payload shape")

        notices = build_notices(records)
        LOGGER.info("Fetched %s NOTAMs for %s from FAA NMS", len(notices), location_code)
        return notices
