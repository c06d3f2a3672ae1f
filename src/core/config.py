"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_SEEN_CAP = 1000
DEFAULT_MESSAGE_DELAY_SECONDS = 2.0

UNSTABLE_ID_POLICIES = ("deliver", "skip")


@dataclass(frozen=True)
class PollerConfig:
    """Settings for one polling orchestrator instance."""

    location_code: str
    destination: str
    startup_probe: bool = False
    message_delay_seconds: float = DEFAULT_MESSAGE_DELAY_SECONDS
    # "deliver": fallback-id notices are always new and redeliver every cycle.
    # "skip": fallback-id notices are logged and never delivered.
    unstable_id_policy: str = "deliver"
    seen_cap: int = DEFAULT_SEEN_CAP

    def __post_init__(self) -> None:
        if self.unstable_id_policy not in UNSTABLE_ID_POLICIES:
            raise ValueError(f"Unsupported unstable id policy: {self.unstable_id_policy}")
        if self.seen_cap < 1:
            raise ValueError("seen_cap must be at least 1")
