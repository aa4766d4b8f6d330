# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Batch request/result models."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..errors import ConfigurationError
from .probe import ProbeOutcome


class BatchState(str, Enum):
    IDLE = "IDLE"
    DISPATCHING = "DISPATCHING"
    DRAINING = "DRAINING"
    COMPLETE = "COMPLETE"


@dataclass(frozen=True)
class BatchRequest:
    """
    One caller-submitted set of targets.

    `targets` keeps caller order and may repeat a URL; each occurrence is
    probed on its own. `overall_deadline` bounds the whole batch in seconds
    (None for no deadline). A bare string is rejected rather than probed
    character by character.
    """

    targets: Sequence[str]
    timeout: float
    max_workers: int
    overall_deadline: float | None = None

    def __post_init__(self) -> None:
        if isinstance(self.targets, str):
            raise ConfigurationError("targets must be a sequence of URLs, not a single string")
        object.__setattr__(self, "targets", tuple(self.targets))

    @property
    def effective_worker_count(self) -> int:
        return max(0, min(self.max_workers, len(self.targets)))


@dataclass
class BatchResult:
    """Outcomes for one batch, one per submitted target, in completion order."""

    outcomes: list[ProbeOutcome] = field(default_factory=list)
    total_elapsed: float = 0.0
    cancelled: bool = False
    worker_count: int = 0
    peak_concurrency: int = 0

    @property
    def total_checked(self) -> int:
        return len(self.outcomes)

    @property
    def total_available(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.available)

    @property
    def total_time_ms(self) -> int:
        return int(self.total_elapsed * 1000)

    def outcomes_for(self, target: str) -> list[ProbeOutcome]:
        """All outcomes recorded for `target` (several when the URL was repeated)."""
        return [outcome for outcome in self.outcomes if outcome.target == target]

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": [outcome.to_dict() for outcome in self.outcomes],
            "total_checked": self.total_checked,
            "total_available": self.total_available,
            "total_time_ms": self.total_time_ms,
            "cancelled": self.cancelled,
            "worker_count": self.worker_count,
        }
