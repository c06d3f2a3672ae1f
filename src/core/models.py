"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any upstream-specific record shapes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Tuple


@dataclass(frozen=True)
class Notice:
    """One normalized NOTAM as returned by a source adapter."""

    id: str
    text: str
    number: Optional[str] = None
    # Original upstream record, kept for diagnostics only.
    raw: Any = field(default=None, compare=False, repr=False)
    # False when the id is the process-time+random fallback.
    stable_id: bool = True


@dataclass(frozen=True)
class SeenSet:
    """Insertion-ordered identifiers of notices already delivered."""

    notice_ids: Tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.notice_ids)


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of a single transport send."""

    success: bool
    error: Optional[str] = None


@dataclass
class CycleReport:
    """Summary of one poll cycle, kept for the health endpoint and logs."""

    started_at: datetime
    finished_at: Optional[datetime] = None
    fetched: int = 0
    new: int = 0
    delivered: int = 0
    failed: int = 0
    skipped_unstable: int = 0
    probe_sent: bool = False
    fetch_error: Optional[str] = None

    def as_dict(self) -> dict:
        return {
            "startedAt": self.started_at.isoformat(),
            "finishedAt": self.finished_at.isoformat() if self.finished_at else None,
            "fetched": self.fetched,
            "new": self.new,
            "delivered": self.delivered,
            "failed": self.failed,
            "skippedUnstable": self.skipped_unstable,
            "probeSent": self.probe_sent,
            "fetchError": self.fetch_error,
        }
