# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging helpers for urlcheck."""

from __future__ import annotations

import logging
import os

DEFAULT_LOG_LEVEL = os.getenv("URLCHECK_LOG_LEVEL", "WARNING").upper()

_LEVEL_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL"}

# Transport libraries log every request at INFO; keep them out of batch output.
_NOISY_LOGGERS = ("httpx", "httpcore")


def resolve_log_level(level: str | None = None) -> int:
    """Translate a level name (``debug``, ``warn``, ...) into a logging constant."""
    name = (level or DEFAULT_LOG_LEVEL).strip().upper()
    name = _LEVEL_ALIASES.get(name, name)
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.WARNING


def setup_logging(level: str | None = None) -> None:
    """Configure standard logging for CLI/library use."""
    effective_level = resolve_log_level(level)
    logging.basicConfig(
        level=effective_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if effective_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["resolve_log_level", "setup_logging"]
