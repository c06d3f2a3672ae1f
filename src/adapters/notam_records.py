"""Normalization of upstream NOTAM records into core Notices.

Every source adapter funnels its raw dicts through here so identity and text
layout stay identical regardless of which upstream produced them.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from core.models import Notice
from core.notice_ids import (
    END_FIELDS,
    LOCATION_FIELDS,
    START_FIELDS,
    first_value,
    resolve_notice_id,
)

LOGGER = logging.getLogger(__name__)

NUMBER_FIELDS = ("notamNumber", "id", "key", "notamId")
TEXT_FIELDS = ("text", "message", "body", "traditionalMessage", "notam")
LIST_KEYS = ("notams", "items", "results", "data")


def pick_notam_list(payload: Any) -> Optional[List[Any]]:
    """Return the record list from a bare list or a known wrapper key."""

    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return None
    for key in LIST_KEYS:
        value = payload.get(key)
        if value is not None:
            return value if isinstance(value, list) else None
    return []


def build_notice(record: Mapping[str, Any]) -> Notice:
    """Map one raw record to a Notice.

    Text layout: "<LOC> <NUMBER> | <text> | Start: <start> | End: <end>".
    """

    location = first_value(record, LOCATION_FIELDS) or "UNKNOWN"
    number = first_value(record, NUMBER_FIELDS)
    body = first_value(record, TEXT_FIELDS)
    start = first_value(record, START_FIELDS)
    end = first_value(record, END_FIELDS)

    parts = [f"{location} {number}" if number else location]
    if body:
        parts.append(body)
    if start:
        parts.append(f"Start: {start}")
    if end:
        parts.append(f"End: {end}")

    notice_id, stable = resolve_notice_id(record)
    return Notice(
        id=notice_id,
        text=" | ".join(parts),
        number=number,
        raw=dict(record),
        stable_id=stable,
    )


def build_notices(records: List[Any]) -> List[Notice]:
    """Normalize a record list, dropping anything that is not a usable dict."""

    notices: List[Notice] = []
    skipped = 0
    for record in records:
        if not isinstance(record, Mapping):
            skipped += 1
            continue
        notice = build_notice(record)
        if not notice.id or not notice.text:
            skipped += 1
            continue
        notices.append(notice)
    if skipped:
        LOGGER.warning("Skipped %s malformed NOTAM records", skipped)
    return notices
