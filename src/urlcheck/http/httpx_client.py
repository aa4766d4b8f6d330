# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

import logging
import socket
import threading
import time
from typing import Any

import httpx

from ..config import CheckerSettings, load_settings
from ..errors import ErrorCategory, categorize_exception
from .client import HttpClient
from .models import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)


class _RequestWatchdog:
    """
    Enforces a whole-request time limit on top of httpx's per-phase timeouts.

    httpx applies its timeout to each connect/read/write separately, so a
    server sending its head a few bytes at a time never trips it. The
    watchdog learns the request's socket through the httpcore trace hook and
    shuts it down once `limit` seconds have passed, which fails the blocked
    read immediately.
    """

    def __init__(self, limit: float):
        self.limit = limit
        self.fired = threading.Event()
        self._lock = threading.Lock()
        self._sock: socket.socket | None = None
        self._timer = threading.Timer(limit, self._expire)
        self._timer.daemon = True

    def __enter__(self) -> _RequestWatchdog:
        self._timer.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._timer.cancel()

    def trace(self, event: str, info: dict[str, Any]) -> None:
        if event != "connection.connect_tcp.complete":
            return
        stream = info.get("return_value")
        sock = stream.get_extra_info("socket") if stream is not None else None
        with self._lock:
            self._sock = sock
            expired = self.fired.is_set()
        if expired:
            self._shutdown(sock)

    def _expire(self) -> None:
        with self._lock:
            self.fired.set()
            sock = self._sock
        self._shutdown(sock)

    def _shutdown(self, sock: socket.socket | None) -> None:
        if sock is None:
            return
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError as exc:
            # Already closed by httpcore; nothing left to interrupt.
            logger.debug("watchdog shutdown after %.3fs skipped: %r", self.limit, exc)


class HttpxClient(HttpClient):
    """
    Synchronous httpx client wrapper shared by all batch workers.

    The connection pool is left unbounded so a worker never waits on pool
    acquisition; concurrency is bounded by the worker count instead. The
    request timeout bounds the whole exchange up to the response head, not
    just each individual read.
    """

    def __init__(self, settings: CheckerSettings | None = None, client: httpx.Client | None = None):
        self.settings = settings or load_settings()
        self._client = client or httpx.Client(
            follow_redirects=False,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
            limits=httpx.Limits(max_connections=None, max_keepalive_connections=None),
        )

    def request(self, request: HttpRequest) -> HttpResponse:
        headers = dict(request.headers or {})
        headers.setdefault("User-Agent", self.settings.user_agent)
        timeout = request.timeout if request.timeout is not None else self.settings.timeout

        start = time.perf_counter()
        with _RequestWatchdog(timeout) as watchdog:
            try:
                with self._client.stream(
                    request.method,
                    request.url,
                    headers=headers,
                    timeout=timeout,
                    follow_redirects=request.allow_redirects,
                    extensions={"trace": watchdog.trace},
                ) as resp:
                    elapsed = time.perf_counter() - start
                    if watchdog.fired.is_set() or elapsed > timeout:
                        return self._timed_out(request, elapsed, timeout)
                    return HttpResponse(
                        ok=True,
                        status_code=resp.status_code,
                        headers=dict(resp.headers),
                        url=str(resp.url),
                        elapsed=elapsed,
                        meta={"http_version": resp.http_version},
                    )
            except Exception as exc:  # noqa: BLE001
                elapsed = time.perf_counter() - start
                if watchdog.fired.is_set():
                    return self._timed_out(request, elapsed, timeout)
                logger.debug("request to %s failed after %.3fs: %r", request.url, elapsed, exc)
                return HttpResponse(
                    ok=False,
                    url=request.url,
                    elapsed=elapsed,
                    error_message=str(exc) or type(exc).__name__,
                    error_type=type(exc).__name__,
                    error_category=categorize_exception(exc),
                )

    def _timed_out(self, request: HttpRequest, elapsed: float, timeout: float) -> HttpResponse:
        logger.debug("request to %s exceeded %.3fs total (%.3fs)", request.url, timeout, elapsed)
        return HttpResponse(
            ok=False,
            url=request.url,
            elapsed=elapsed,
            error_message=f"no response head within {timeout:.3f}s",
            error_type="TimeoutError",
            error_category=ErrorCategory.TIMEOUT,
        )

    def close(self) -> None:
        self._client.close()
