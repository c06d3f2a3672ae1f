"""Core NOTAM polling pipeline.

This module is integration-agnostic. It only relies on ports for fetching,
delivery and seen-set storage, so upstream rewrites never touch it.

One cycle runs in a strict order:
1) Fetch notices for the configured location (failures become "nothing new")
2) Diff against the in-memory seen-set
3) Optional one-shot startup probe when nothing is new
4) Sequential delivery; each success is marked seen immediately
5) Persist the seen-set once for the whole batch
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional

from core.config import PollerConfig
from core.dedup import contains, diff_new, mark_seen
from core.models import CycleReport, DeliveryResult, Notice, SeenSet
from core.ports import DeliveryTransport, NoticeSource, SeenSetStore
from core.sanitizer import clean_message

LOGGER = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


class NoticePoller:
    """Owns the seen-set, the busy flag and the startup probe flag."""

    def __init__(
        self,
        source: NoticeSource,
        transport: DeliveryTransport,
        store: SeenSetStore,
        config: PollerConfig,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._source = source
        self._transport = transport
        self._store = store
        self._config = config
        self._sleep = sleep
        self._seen = SeenSet()
        self._polling = False
        self._probe_pending = config.startup_probe
        self._last_report: Optional[CycleReport] = None

    @property
    def is_polling(self) -> bool:
        return self._polling

    @property
    def seen_count(self) -> int:
        return len(self._seen)

    @property
    def seen(self) -> SeenSet:
        return self._seen

    @property
    def last_report(self) -> Optional[CycleReport]:
        return self._last_report

    def load_state(self) -> None:
        """Load the durable seen-set; a missing or corrupt file starts cold."""

        self._seen = self._store.load()
        LOGGER.info("Loaded state with %s seen NOTAMs", len(self._seen))

    def reset(self) -> None:
        """Forget every delivered id, in memory and on disk."""

        self._seen = SeenSet()
        self._store.save(self._seen)
        LOGGER.info("Seen-set reset")

    async def poll(self) -> Optional[CycleReport]:
        """Run one cycle, or return None at once if a cycle is already running.

        Timer and manual triggers both call this. Overlapping calls are dropped,
        not queued. The flag is a plain boolean because everything runs on a
        single event loop.
        """

        if self._polling:
            LOGGER.info("Polling already in progress, skipping")
            return None

        self._polling = True
        try:
            return await self._run_cycle()
        finally:
            self._polling = False

    async def _run_cycle(self) -> CycleReport:
        report = CycleReport(started_at=datetime.now(timezone.utc))
        LOGGER.info("Polling NOTAMs for %s", self._config.location_code)

        notices = await self._fetch(report)
        report.fetched = len(notices)

        fresh = diff_new(notices, self._seen)
        report.new = len(fresh)
        queue = self._apply_unstable_policy(fresh, report)
        LOGGER.info("Found %s new NOTAMs out of %s fetched", len(queue), len(notices))

        probe: Optional[Notice] = None
        if self._probe_pending and not queue and notices:
            # Not pre-marked: it is only marked after a successful send.
            probe = notices[0]
            queue.append(probe)
            LOGGER.info("Startup probe: sending latest NOTAM %s to verify delivery", probe.id)

        await self._deliver(queue, probe, report)

        self._store.save(self._seen)
        # One-shot: any cycle reaching the save step disarms the probe.
        self._probe_pending = False

        report.finished_at = datetime.now(timezone.utc)
        self._last_report = report
        LOGGER.info(
            "Poll complete: fetched=%s, delivered=%s, failed=%s, seen=%s",
            report.fetched,
            report.delivered,
            report.failed,
            len(self._seen),
        )
        return report

    async def _fetch(self, report: CycleReport) -> List[Notice]:
        try:
            notices = await self._source.fetch(self._config.location_code)
        except Exception as exc:
            LOGGER.exception("Failed to fetch NOTAMs for %s", self._config.location_code)
            report.fetch_error = str(exc) or exc.__class__.__name__
            return []
        return list(notices)

    def _apply_unstable_policy(self, fresh: List[Notice], report: CycleReport) -> List[Notice]:
        unstable = [notice for notice in fresh if not notice.stable_id]
        if not unstable:
            return list(fresh)

        if self._config.unstable_id_policy == "skip":
            report.skipped_unstable = len(unstable)
            LOGGER.warning("Skipping %s NOTAMs without a stable identifier", len(unstable))
            return [notice for notice in fresh if notice.stable_id]

        LOGGER.warning(
            "%s NOTAMs have no stable identifier and will be delivered again next cycle",
            len(unstable),
        )
        return list(fresh)

    async def _deliver(self, queue: List[Notice], probe: Optional[Notice], report: CycleReport) -> None:
        attempted = False
        for notice in queue:
            # An earlier copy in this batch was already delivered.
            if notice is not probe and contains(self._seen, notice.id):
                LOGGER.info("Dedup skip for %s (already delivered this cycle)", notice.id)
                continue

            if attempted:
                await self._sleep(self._config.message_delay_seconds)
            attempted = True

            LOGGER.info("Processing new NOTAM: %s", notice.id)
            message = clean_message(notice, self._config.location_code)
            result = await self._send(message, notice)

            if result.success:
                # Fallback ids never match a later poll; storing them would only
                # evict real ids from the capped seen-set.
                if notice.stable_id:
                    self._seen = mark_seen(self._seen, notice.id, self._config.seen_cap)
                report.delivered += 1
                if notice is probe:
                    report.probe_sent = True
                LOGGER.info("Sent NOTAM %s to pager", notice.id)
            else:
                # Left unmarked so the next cycle retries it.
                report.failed += 1
                LOGGER.error("Failed to send NOTAM %s: %s", notice.id, result.error)

    async def _send(self, message: str, notice: Notice) -> DeliveryResult:
        try:
            return await self._transport.send(self._config.destination, message)
        except Exception as exc:
            LOGGER.exception("Transport raised while sending NOTAM %s", notice.id)
            return DeliveryResult(success=False, error=str(exc) or exc.__class__.__name__)
