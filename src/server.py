"""HTTP control surface for notam-pager.

Endpoints:
- GET  /        -> service status summary
- GET  /health  -> liveness and whether a poll is running
- POST /poll    -> trigger one cycle in the background (dropped if busy)
- POST /reset   -> clear the seen-set in memory and on disk
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import BackgroundTasks, FastAPI

from core.poller import NoticePoller
from scheduler import PollScheduler

SERVICE_NAME = "NOTAM-Pager - Airport NOTAM to Pager Service"


def create_app(
    poller: NoticePoller,
    scheduler: Optional[PollScheduler] = None,
    *,
    location_code: str,
    poll_interval_seconds: float,
) -> FastAPI:
    """Build the FastAPI app around an already-configured poller."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        poller.load_state()
        if scheduler is not None:
            scheduler.start()
        try:
            yield
        finally:
            if scheduler is not None:
                await scheduler.stop()

    app = FastAPI(title="notam-pager", lifespan=lifespan)

    @app.get("/")
    async def status() -> dict:
        return {
            "service": SERVICE_NAME,
            "status": "running",
            "config": {
                "airportCode": location_code,
                "pollInterval": f"{poll_interval_seconds:g} seconds",
                "seenNotams": poller.seen_count,
            },
            "endpoints": {
                "health": "/health",
                "poll": "/poll",
                "reset": "/reset",
            },
        }

    @app.get("/health")
    async def health() -> dict:
        report = poller.last_report
        return {
            "status": "ok",
            "polling": poller.is_polling,
            "seenNotams": poller.seen_count,
            "lastPoll": report.as_dict() if report else None,
        }

    @app.post("/poll", status_code=202)
    async def trigger_poll(background_tasks: BackgroundTasks) -> dict:
        # Same entry point as the timer; the poller drops it if a cycle is running.
        background_tasks.add_task(poller.poll)
        return {"status": "accepted", "message": "Manual poll initiated"}

    @app.post("/reset")
    async def reset() -> dict:
        poller.reset()
        return {"status": "ok", "message": "State reset successfully"}

    return app
