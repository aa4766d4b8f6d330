# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Single-target reachability probe."""

from __future__ import annotations

import logging
import time
from urllib.parse import urlsplit

from ..errors import ErrorCategory, categorize_exception
from ..http.client import HttpClient
from ..http.models import HttpRequest, HttpResponse
from ..models import ProbeOutcome
from ..utils.cancellation import CancellationToken
from ..utils.context import get_check_context, get_http_client, get_settings

logger = logging.getLogger(__name__)

PROBEABLE_SCHEMES = frozenset({"http", "https"})

# Failures that a fired token can explain; a malformed URL fails regardless.
_CANCELLABLE = frozenset({ErrorCategory.TIMEOUT, ErrorCategory.CONNECTION_ERROR, ErrorCategory.UNKNOWN_ERROR})


def is_probeable_url(target: str) -> bool:
    """Return True for absolute http(s) URLs with a host."""
    if not isinstance(target, str) or not target.strip():
        return False
    try:
        parts = urlsplit(target.strip())
        host = parts.hostname
    except ValueError:
        return False
    return parts.scheme.lower() in PROBEABLE_SCHEMES and bool(host)


def probe_target(
    target: str,
    *,
    timeout: float | None = None,
    token: CancellationToken | None = None,
    http_client: HttpClient | None = None,
) -> ProbeOutcome:
    """
    Issue one GET against `target` and classify the response.

    Redirects are not followed; a 3xx is the final answer. Missing arguments
    are taken from the ambient CheckContext. Never raises for per-target
    failures: they come back as an unavailable outcome with `error` set.
    """
    context = get_check_context()
    settings = get_settings()
    token = token or context.token
    timeout = timeout if timeout is not None else settings.timeout

    if not is_probeable_url(target):
        return ProbeOutcome.failed(target, ErrorCategory.MALFORMED_TARGET, f"{target!r} is not an absolute http(s) URL")

    if token is not None and token.cancelled:
        return ProbeOutcome.failed(target, ErrorCategory.CANCELLED, token.reason)

    effective_timeout = token.cap(timeout) if token is not None else timeout
    if effective_timeout <= 0:
        if token is not None:
            return ProbeOutcome.failed(target, ErrorCategory.CANCELLED, token.reason)
        return ProbeOutcome.failed(target, ErrorCategory.TIMEOUT, f"no time left to probe (timeout={timeout})")

    client = http_client or get_http_client()
    request = HttpRequest(
        url=target.strip(),
        headers={"User-Agent": settings.user_agent},
        timeout=effective_timeout,
        allow_redirects=False,
    )

    start = time.perf_counter()
    try:
        response = client.request(request)
    except Exception as exc:  # noqa: BLE001
        response = HttpResponse(
            ok=False,
            error_message=str(exc),
            error_type=type(exc).__name__,
            error_category=categorize_exception(exc),
        )
    measured = time.perf_counter() - start
    elapsed = response.elapsed if response.elapsed > 0 else measured

    if response.ok and response.status_code is not None:
        if elapsed > effective_timeout:
            # A server trickling its head in under the per-read limit still counts as too slow.
            response = HttpResponse(
                ok=False,
                elapsed=elapsed,
                error_message=f"response took {elapsed:.3f}s, limit {effective_timeout:.3f}s",
                error_type="TimeoutError",
                error_category=ErrorCategory.TIMEOUT,
            )
        else:
            return ProbeOutcome.from_status(target, response.status_code, elapsed)

    category = response.error_category
    if category is ErrorCategory.NONE:
        category = ErrorCategory.UNKNOWN_ERROR
    if token is not None and category in _CANCELLABLE and token.cancelled:
        category = ErrorCategory.CANCELLED

    logger.debug("probe %s failed (%s) after %.3fs: %s", target, category.value, elapsed, response.error_message)
    return ProbeOutcome.failed(target, category, response.error_message, response_time=elapsed)


__all__ = ["PROBEABLE_SCHEMES", "is_probeable_url", "probe_target"]
