# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used by probes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..errors import ErrorCategory

Headers = dict[str, str]


@dataclass
class HttpRequest:
    """Normalized request representation consumed by HttpClient implementations."""

    url: str
    method: str = "GET"
    headers: Headers | None = None
    timeout: float | None = None
    allow_redirects: bool = False


@dataclass
class HttpResponse:
    """
    Normalized response head.

    Probes only need the status line, so clients return as soon as headers
    arrive and never read the body. `elapsed` is wall time in seconds from
    send to headers received, or to the failure.
    """

    ok: bool
    status_code: int | None = None
    headers: Headers = field(default_factory=dict)
    url: str | None = None
    elapsed: float = 0.0
    error_message: str | None = None
    error_type: str | None = None
    error_category: ErrorCategory = ErrorCategory.NONE
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def location(self) -> str | None:
        """Redirect target when the response is a 3xx that was not followed."""
        for key, value in self.headers.items():
            if key.lower() == "location":
                return value
        return None
