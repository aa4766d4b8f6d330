# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-process HttpClient implementations."""

from __future__ import annotations

import threading
import time

from ..errors import ErrorCategory
from .client import HttpClient
from .models import HttpRequest, HttpResponse


class StubHttpClient(HttpClient):
    """
    Deterministic, programmable HttpClient for tests and dry runs.

    Responses are keyed by URL. An optional per-request `delay` simulates
    server latency; when the delay exceeds the request timeout the stub waits
    for the timeout and reports a TIMEOUT failure, as a real transport would.
    Safe to share between worker threads.
    """

    def __init__(self, responses: dict[str, HttpResponse] | None = None, *, delay: float = 0.0):
        self._responses = responses or {}
        self._lock = threading.Lock()
        self.delay = delay
        self.requests: list[HttpRequest] = []

    def add(self, url: str, response: HttpResponse) -> None:
        self._responses[url] = response

    def request(self, request: HttpRequest) -> HttpResponse:
        with self._lock:
            self.requests.append(request)
        timeout = request.timeout
        if self.delay:
            if timeout is not None and self.delay > timeout:
                time.sleep(timeout)
                return HttpResponse(
                    ok=False,
                    url=request.url,
                    elapsed=timeout,
                    error_message="timed out",
                    error_type="ReadTimeout",
                    error_category=ErrorCategory.TIMEOUT,
                )
            time.sleep(self.delay)
        if request.url in self._responses:
            template = self._responses[request.url]
            return HttpResponse(
                ok=template.ok,
                status_code=template.status_code,
                headers=dict(template.headers),
                url=template.url or request.url,
                elapsed=template.elapsed or self.delay,
                error_message=template.error_message,
                error_type=template.error_type,
                error_category=template.error_category,
                meta=dict(template.meta),
            )
        return HttpResponse(
            ok=False,
            url=request.url,
            elapsed=self.delay,
            error_message="No stubbed response configured",
            error_type="ConnectError",
            error_category=ErrorCategory.CONNECTION_ERROR,
        )

    def close(self) -> None:
        return None
