"""Seen-set helpers (core domain).

The seen-set is an insertion-ordered, FIFO-capped sequence of notice ids.
Every helper here is pure: callers own the SeenSet and replace it with the
returned value.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

from core.config import DEFAULT_SEEN_CAP
from core.models import Notice, SeenSet


def contains(seen: SeenSet, notice_id: str) -> bool:
    """Exact string membership test."""

    return notice_id in seen.notice_ids


def trim(notice_ids: Sequence[str], cap: int = DEFAULT_SEEN_CAP) -> SeenSet:
    """Build a SeenSet from ids, dropping duplicates and keeping the newest `cap`."""

    unique: dict[str, None] = {}
    for notice_id in notice_ids:
        # Re-inserting keeps the first position, matching mark_seen semantics.
        unique.setdefault(notice_id, None)
    ordered = list(unique)
    if len(ordered) > cap:
        ordered = ordered[-cap:]
    return SeenSet(tuple(ordered))


def mark_seen(seen: SeenSet, notice_id: str, cap: int = DEFAULT_SEEN_CAP) -> SeenSet:
    """Insert an id once; evict the oldest entries when the cap is exceeded."""

    if contains(seen, notice_id):
        return seen

    notice_ids = seen.notice_ids + (notice_id,)
    if len(notice_ids) > cap:
        notice_ids = notice_ids[-cap:]
    return SeenSet(notice_ids)


def diff_new(notices: Iterable[Notice], seen: SeenSet) -> List[Notice]:
    """Return notices whose id is not in the seen-set, preserving input order."""

    known = set(seen.notice_ids)
    return [notice for notice in notices if notice.id not in known]
