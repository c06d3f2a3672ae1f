"""Ports (interfaces) used by the core poller.

Ports define the minimal contracts the poller depends on, so that the core
can be reused with different upstreams and pager services.
"""

from __future__ import annotations

from typing import List, Protocol

from core.models import DeliveryResult, Notice, SeenSet


class SourceError(RuntimeError):
    """Raised by source adapters when an upstream fetch fails for any reason."""


class NoticeSource(Protocol):
    """Upstream fetch strategy: given a location code, return normalized notices."""

    async def fetch(self, location_code: str) -> List[Notice]:
        ...


class DeliveryTransport(Protocol):
    """Outbound pager channel. Errors are returned, never raised."""

    async def send(self, destination: str, message: str) -> DeliveryResult:
        ...


class SeenSetStore(Protocol):
    """Durable storage for the seen-set."""

    def load(self) -> SeenSet:
        ...

    def save(self, seen: SeenSet) -> None:
        ...
