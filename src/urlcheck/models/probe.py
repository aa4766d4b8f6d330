# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe outcome model."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from ..errors import ErrorCategory, describe_failure

AVAILABLE_STATUS_RANGE = range(200, 400)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ProbeOutcome:
    """
    The recorded result of probing one target.

    `response_time` is in seconds. A failed probe has no `status_code` and a
    non-empty `error`; an HTTP response outside 2xx/3xx is unavailable but is
    not an error.
    """

    target: str
    status_code: int | None = None
    response_time: float = 0.0
    available: bool = False
    error: str | None = None
    error_category: ErrorCategory = ErrorCategory.NONE
    observed_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def from_status(cls, target: str, status_code: int, response_time: float) -> ProbeOutcome:
        return cls(
            target=target,
            status_code=status_code,
            response_time=response_time,
            available=status_code in AVAILABLE_STATUS_RANGE,
        )

    @classmethod
    def failed(
        cls,
        target: str,
        category: ErrorCategory,
        detail: str | None = None,
        *,
        response_time: float = 0.0,
    ) -> ProbeOutcome:
        return cls(
            target=target,
            response_time=response_time,
            error=describe_failure(category, detail),
            error_category=category,
        )

    @property
    def failed_to_respond(self) -> bool:
        return self.error is not None

    @property
    def response_time_ms(self) -> int:
        return int(self.response_time * 1000)

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.target,
            "status_code": self.status_code,
            "available": self.available,
            "error": self.error,
            "error_category": self.error_category.value,
            "response_time_ms": self.response_time_ms,
            "checked_at": self.observed_at.isoformat(),
        }
