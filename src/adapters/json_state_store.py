"""JSON seen-set storage adapter.

Implements the core SeenSetStore port with a single JSON document:

    { "seenNotams": ["id-1", "id-2", ...] }

Operators may delete the file to force full redelivery on next start.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile

from core.config import DEFAULT_SEEN_CAP
from core.dedup import trim
from core.models import SeenSet

LOGGER = logging.getLogger(__name__)

STATE_KEY = "seenNotams"


class JsonSeenSetStore:
    """File-backed seen-set that satisfies the SeenSetStore contract."""

    def __init__(self, path: str, max_entries: int = DEFAULT_SEEN_CAP) -> None:
        self._path = path
        self._max_entries = max_entries

    @property
    def path(self) -> str:
        return self._path

    def load(self) -> SeenSet:
        """Return the stored seen-set, or an empty one on any failure.

        The service must always be able to start cold, so a missing file,
        unreadable file or unexpected document shape is never fatal.
        """

        try:
            with open(self._path, "r", encoding="utf-8") as handle:
                document = json.load(handle)
        except FileNotFoundError:
            LOGGER.info("No state file at %s, starting with an empty seen-set", self._path)
            return SeenSet()
        except (OSError, ValueError):
            LOGGER.warning("Unreadable state file %s, starting with an empty seen-set", self._path, exc_info=True)
            return SeenSet()

        if not isinstance(document, dict) or not isinstance(document.get(STATE_KEY), list):
            LOGGER.warning("Unexpected state document in %s, starting with an empty seen-set", self._path)
            return SeenSet()

        notice_ids = [item for item in document[STATE_KEY] if isinstance(item, str) and item]
        return trim(notice_ids, self._max_entries)

    def save(self, seen: SeenSet) -> None:
        """Write to a temp file beside the target, then rename over it.

        A failed save is logged only: it can cause a duplicate delivery after a
        restart, but leaves the previous file intact.
        """

        directory = os.path.dirname(os.path.abspath(self._path))
        payload = json.dumps({STATE_KEY: list(seen.notice_ids)}, indent=2)
        temp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=directory,
                prefix=".notam-state-",
                suffix=".tmp",
                delete=False,
            ) as handle:
                temp_path = handle.name
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_path, self._path)
            temp_path = None
        except OSError:
            LOGGER.exception("Error saving state to %s", self._path)
        finally:
            if temp_path and os.path.exists(temp_path):
                try:
                    os.remove(temp_path)
                except OSError:
                    LOGGER.warning("Could not remove temp state file %s", temp_path)
