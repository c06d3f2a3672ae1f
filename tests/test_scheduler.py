from __future__ import annotations

import asyncio

import pytest

from scheduler import PollScheduler


class SlowPoller:
    def __init__(self) -> None:
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        self.completed = 0

    async def poll(self) -> None:
        self.started.set()
        await self.release.wait()
        self.completed += 1


class CountingPoller:
    def __init__(self, fail: bool = False) -> None:
        self.calls = 0
        self.fail = fail

    async def poll(self) -> None:
        self.calls += 1
        if self.fail:
            raise RuntimeError("unexpected")


def test_stop_waits_for_in_flight_cycle() -> None:
    async def scenario() -> SlowPoller:
        poller = SlowPoller()
        scheduler = PollScheduler(poller, interval_seconds=60)
        scheduler.start()
        await poller.started.wait()

        stopping = asyncio.create_task(scheduler.stop())
        await asyncio.sleep(0.01)
        assert not stopping.done()

        poller.release.set()
        await stopping
        assert not scheduler.running
        return poller

    assert asyncio.run(scenario()).completed == 1


def test_scheduler_polls_on_interval_and_survives_errors() -> None:
    async def scenario() -> CountingPoller:
        poller = CountingPoller(fail=True)
        scheduler = PollScheduler(poller, interval_seconds=0.01)
        scheduler.start()
        await asyncio.sleep(0.1)
        await scheduler.stop()
        return poller

    assert asyncio.run(scenario()).calls >= 2


@pytest.mark.parametrize("interval", [0, -5])
def test_non_positive_interval_is_rejected(interval: float) -> None:
    with pytest.raises(RuntimeError, match="Poll interval must be positive"):
        PollScheduler(CountingPoller(), interval_seconds=interval)
