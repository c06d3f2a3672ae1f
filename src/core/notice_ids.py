"""Helpers for deriving stable notice identifiers from upstream records.

Upstreams have changed identifier schemes several times, so identity is
resolved in three tiers: an explicit upstream id, a content key built from
location/condition/time window, and finally a process-time+random token.
The last tier is not stable: such a notice looks new on every poll.
"""

from __future__ import annotations

import random
import string
import time
from typing import Any, Mapping, Optional, Sequence, Tuple

ID_FIELDS = ("id", "notamId", "notamNumber", "key", "transactionId")
LOCATION_FIELDS = ("location", "icao", "icaoId", "designator")
CONDITION_FIELDS = ("condition",)
START_FIELDS = ("startTime", "start", "effectiveFrom")
END_FIELDS = ("endTime", "end", "effectiveTo")

CONTENT_KEY_MAX_CHARS = 80
FALLBACK_PREFIX = "notam_"

_BASE36 = string.digits + string.ascii_lowercase


def first_value(record: Mapping[str, Any], fields: Sequence[str]) -> Optional[str]:
    """Return the first non-empty field value as a stripped string."""

    for name in fields:
        value = record.get(name)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def content_key(record: Mapping[str, Any]) -> Optional[str]:
    """Join location, condition and time window into a deterministic key."""

    parts = [
        first_value(record, LOCATION_FIELDS),
        first_value(record, CONDITION_FIELDS),
        first_value(record, START_FIELDS),
        first_value(record, END_FIELDS),
    ]
    present = [part for part in parts if part]
    if not present:
        return None
    return "_".join(present)[:CONTENT_KEY_MAX_CHARS]


def fallback_id() -> str:
    """Return a unique, non-deterministic id for records with no usable fields."""

    suffix = "".join(random.choice(_BASE36) for _ in range(6))
    return f"{FALLBACK_PREFIX}{int(time.time() * 1000)}_{suffix}"


def resolve_notice_id(record: Mapping[str, Any]) -> Tuple[str, bool]:
    """Return (notice_id, stable) for one upstream record."""

    explicit = first_value(record, ID_FIELDS)
    if explicit:
        return explicit, True

    key = content_key(record)
    if key:
        return key, True

    return fallback_id(), False
