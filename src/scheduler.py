"""Timer that drives the poller on a fixed interval."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from core.poller import NoticePoller

LOGGER = logging.getLogger(__name__)


class PollScheduler:
    """Run one poll immediately, then one per interval until stopped.

    Stopping only ends the timer: a cycle already in flight is awaited to
    completion, never cancelled.
    """

    def __init__(self, poller: NoticePoller, interval_seconds: float) -> None:
        if interval_seconds <= 0:
            raise RuntimeError(f"Poll interval must be positive, got {interval_seconds}")
        self._poller = poller
        self._interval = interval_seconds
        self._stop = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._task = asyncio.create_task(self._loop())
        LOGGER.info("Starting NOTAM polling every %s seconds", self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._stop.set()
        await self._task
        self._task = None
        LOGGER.info("Stopped NOTAM polling")

    async def _loop(self) -> None:
        while not self._stop.is_set():
            try:
                await self._poller.poll()
            except Exception:
                LOGGER.exception("Error during polling")

            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                continue
