"""Application entry point for the notam-pager service."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

import uvicorn
from art import tprint

import settings
from adapters.faa_nms_source import FaaNmsSource
from adapters.file_source import JsonFileSource
from adapters.json_state_store import JsonSeenSetStore
from adapters.pager_transport import PagerTransport
from adapters.telegram_bot_transport import TelegramBotTransport
from core.config import PollerConfig
from core.models import SeenSet
from core.poller import NoticePoller
from core.ports import DeliveryTransport, NoticeSource
from scheduler import PollScheduler
from server import create_app

NAME = "NOTAM PAGER"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(names: list[str]) -> list[str]:
    values = []
    for name in names:
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config.get("redact", []))
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    path = file_cfg.get("path")
    if path:
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        file_handler = RotatingFileHandler(
            path,
            maxBytes=int(file_cfg.get("max_bytes", 5 * 1024 * 1024)),
            backupCount=int(file_cfg.get("backup_count", 5)),
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _build_source() -> NoticeSource:
    # Source selection keeps the poller independent from upstream details.
    if settings.NOTAM_SOURCE == "faa_nms":
        if not settings.FAA_NMS_API_URL:
            raise RuntimeError("FAA_NMS_API_URL is required when NOTAM_SOURCE=faa_nms")
        if not settings.FAA_NMS_API_KEY:
            raise RuntimeError("FAA_NMS_API_KEY is required when NOTAM_SOURCE=faa_nms")
        return FaaNmsSource(
            api_url=settings.FAA_NMS_API_URL,
            api_key=settings.FAA_NMS_API_KEY,
            api_key_header=settings.FAA_NMS_API_KEY_HEADER,
            timeout_seconds=settings.FAA_NMS_TIMEOUT_SECONDS,
            max_results=settings.FAA_NMS_MAX_RESULTS,
            retries=settings.FAA_NMS_RETRIES,
        )
    if settings.NOTAM_SOURCE == "file":
        if not settings.NOTAM_FILE:
            raise RuntimeError("NOTAM_FILE is required when NOTAM_SOURCE=file")
        return JsonFileSource(Path(settings.NOTAM_FILE))
    raise RuntimeError("NOTAM_SOURCE must be 'faa_nms' or 'file'")


def _build_transport() -> DeliveryTransport:
    if settings.DELIVERY_METHOD == "pager":
        if not settings.PAGER_API_URL:
            raise RuntimeError("PAGER_API_URL is required when DELIVERY_METHOD=pager")
        return PagerTransport(
            api_url=settings.PAGER_API_URL,
            api_key=settings.PAGER_API_KEY or None,
            max_chars=settings.PAGER_MAX_CHARS,
            timeout_seconds=settings.PAGER_TIMEOUT_SECONDS,
        )
    if settings.DELIVERY_METHOD == "telegram_bot":
        if not settings.BOT_API:
            raise RuntimeError("BOT_API is required when DELIVERY_METHOD=telegram_bot")
        return TelegramBotTransport(bot_token=settings.BOT_API, timeout_seconds=settings.PAGER_TIMEOUT_SECONDS)
    raise RuntimeError("DELIVERY_METHOD must be 'pager' or 'telegram_bot'")


def _build_store() -> JsonSeenSetStore:
    return JsonSeenSetStore(settings.STATE_FILE, max_entries=settings.SEEN_CAP)


def _build_poller() -> NoticePoller:
    # Fail fast: never poll against a destination we cannot reach.
    if not settings.PAGER_DESTINATION:
        raise RuntimeError("PAGER_DESTINATION (or PAGER_PHONE_NUMBER) must be set")

    config = PollerConfig(
        location_code=settings.AIRPORT_CODE,
        destination=settings.PAGER_DESTINATION,
        startup_probe=settings.STARTUP_PROBE,
        message_delay_seconds=settings.MESSAGE_DELAY_SECONDS,
        unstable_id_policy=settings.UNSTABLE_ID_POLICY,
        seen_cap=settings.SEEN_CAP,
    )
    source = _build_source()
    transport = _build_transport()
    logging.getLogger(__name__).info(
        "Selected source %s and delivery method %s", settings.NOTAM_SOURCE, settings.DELIVERY_METHOD
    )
    return NoticePoller(source=source, transport=transport, store=_build_store(), config=config)


def _run() -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    poller = _build_poller()
    scheduler = PollScheduler(poller, settings.POLL_INTERVAL_SECONDS)
    app = create_app(
        poller,
        scheduler,
        location_code=settings.AIRPORT_CODE,
        poll_interval_seconds=settings.POLL_INTERVAL_SECONDS,
    )

    logger.info("Airport: %s", settings.AIRPORT_CODE)
    logger.info("Destination: %s", settings.PAGER_DESTINATION)
    logger.info("Poll interval: %s seconds", settings.POLL_INTERVAL_SECONDS)

    # uvicorn handles SIGINT/SIGTERM; the app lifespan stops the scheduler and
    # waits for any in-flight cycle before the process exits.
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


def _poll_once() -> None:
    _configure_logging()
    poller = _build_poller()
    poller.load_state()
    report = asyncio.run(poller.poll())
    if report is not None:
        logging.getLogger(__name__).info("Single poll finished: %s", report.as_dict())


def _reset() -> None:
    _configure_logging()
    store = _build_store()
    store.save(SeenSet())
    logging.getLogger(__name__).info("Cleared seen-set at %s", store.path)


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="notam-pager")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the poller and HTTP control server")
    subparsers.add_parser("poll", help="Run a single poll cycle and exit")
    subparsers.add_parser("reset", help="Clear the seen-set so every NOTAM is delivered again")

    args = parser.parse_args(argv)
    if args.command == "poll":
        _poll_once()
        return
    if args.command == "reset":
        _reset()
        return
    _run()


if __name__ == "__main__":
    main()
