"""Pager text cleanup (core domain).

The pager channel only carries plain text, so pictographs, emoji, flags,
zero-width joiners and variation selectors are stripped. Everything else,
non-Latin scripts included, passes through untouched.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Optional

from core.models import Notice

LOGGER = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Error processing NOTAM message"
TIMESTAMP_FORMAT = "%H:%M:%S %d-%m-%Y"

_UNSUPPORTED = re.compile(
    "["
    "\U0001F600-\U0001F64F"  # emoticons
    "\U0001F300-\U0001F5FF"  # misc symbols and pictographs
    "\U0001F680-\U0001F6FF"  # transport and map
    "\U0001F1E0-\U0001F1FF"  # flags
    "\u2600-\u26FF"  # misc symbols
    "\u2700-\u27BF"  # dingbats
    "\U0001F900-\U0001F9FF"  # supplemental symbols and pictographs
    "\U0001FA00-\U0001FA6F"  # chess symbols
    "\U0001FA70-\U0001FAFF"  # symbols and pictographs extended-a
    "\uFE00-\uFE0F"  # variation selectors
    "\u200D"  # zero width joiner
    "]"
)
_EXCESS_NEWLINES = re.compile(r"\n{3,}")


def strip_unsupported(text: Optional[str]) -> str:
    """Remove characters the pager cannot display and trim the result."""

    if not text:
        return ""
    return _UNSUPPORTED.sub("", text).strip()


def clean_message(notice: Notice, location_code: str, now: Optional[datetime] = None) -> str:
    """Format one notice as a pager message.

    Layout: "<CODE> NOTAM", "#<number>", body text, "Received: <local time>".
    Never raises; the delivery pipeline always receives a string.
    """

    try:
        lines = [f"{location_code} NOTAM"]

        reference = notice.number or notice.id
        if reference:
            lines.append(f"#{strip_unsupported(str(reference))}")

        lines.append(strip_unsupported(notice.text))

        received = (now or datetime.now()).astimezone().strftime(TIMESTAMP_FORMAT)
        lines.append(f"Received: {received}")

        message = "\n".join(lines)
        return _EXCESS_NEWLINES.sub("\n\n", message).strip()
    except Exception:
        LOGGER.exception("Failed to clean notice %s", getattr(notice, "id", "?"))
        return FALLBACK_MESSAGE
