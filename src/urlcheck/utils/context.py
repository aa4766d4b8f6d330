# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Per-batch ambient context.

This module provides a ContextVar-backed CheckContext that carries common
batch plumbing (http client, settings, cancellation token). Probes read from
this context when explicit arguments are omitted. Worker threads receive a
copy of the coordinator's context, so values set around a batch are visible
inside every probe.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, replace
from typing import Any

from ..config import CheckerSettings, load_settings
from ..http.client import HttpClient
from .cancellation import CancellationToken


@dataclass(frozen=True)
class CheckContext:
    http_client: HttpClient | None = None
    settings: CheckerSettings | None = None
    token: CancellationToken | None = None


_current_check_context: ContextVar[CheckContext | None] = ContextVar("urlcheck_check_context", default=None)


def get_check_context() -> CheckContext:
    """Return the current ambient check context."""
    return _current_check_context.get() or CheckContext()


def get_settings() -> CheckerSettings:
    """Return CheckerSettings from context, falling back to loading defaults."""
    context = get_check_context()
    if context.settings is not None:
        return context.settings
    return load_settings()


def get_http_client() -> HttpClient:
    """Return the ambient HttpClient from CheckContext."""
    context = get_check_context()
    if context.http_client is None:
        raise RuntimeError("No HttpClient configured; wrap the batch in check_context(http_client=...)")
    return context.http_client


@contextmanager
def check_context(**overrides: Any) -> Iterator[CheckContext]:
    """
    Context manager that layers overrides onto the ambient CheckContext.

    None-valued overrides are ignored to preserve outer context values.
    """
    current = get_check_context()
    filtered = {key: value for key, value in overrides.items() if value is not None}
    new_context = replace(current, **filtered) if filtered else current
    token = _current_check_context.set(new_context)
    try:
        yield new_context
    finally:
        _current_check_context.reset(token)


__all__ = [
    "CheckContext",
    "check_context",
    "get_check_context",
    "get_http_client",
    "get_settings",
]
