# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for urlcheck."""

import os
import re
from dataclasses import dataclass

from .version import __version__

DEFAULT_USER_AGENT = f"urlcheck/{__version__}"

_DURATION_RE = re.compile(r"^\s*(?P<value>\d+(?:\.\d+)?|\.\d+)\s*(?P<unit>ms|s|m)?\s*$")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, None: 1.0}


def parse_duration(raw: str) -> float:
    """
    Parse a duration into seconds.

    Accepts plain numbers (seconds) or a single ``ms``/``s``/``m`` suffix:
    ``"1.5"``, ``"500ms"``, ``"10s"``, ``"2m"``. Raises ValueError otherwise.
    """
    match = _DURATION_RE.match(raw or "")
    if not match:
        raise ValueError(f"invalid duration: {raw!r}")
    return float(match.group("value")) * _DURATION_UNITS[match.group("unit")]


def _duration_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return parse_duration(value) if value is not None else default
    except ValueError:
        return default


def _optional_duration_env(name: str, default: float | None) -> float | None:
    try:
        value = os.getenv(name)
        if value is None:
            return default
        parsed = parse_duration(value)
        return parsed if parsed > 0 else None
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class CheckerSettings:
    """Batch and HTTP defaults. Durations are in seconds."""

    timeout: float = 10.0
    max_workers: int = 100
    overall_deadline: float | None = 60.0
    max_targets: int = 1000
    user_agent: str = DEFAULT_USER_AGENT
    verify_ssl: bool = True

    @classmethod
    def from_env(cls) -> "CheckerSettings":
        """Create settings from environment variables (evaluated at call time)."""
        timeout = _duration_env("URLCHECK_TIMEOUT", cls.timeout)
        if timeout <= 0:
            timeout = cls.timeout
        max_workers = _int_env("URLCHECK_MAX_WORKERS", cls.max_workers)
        if max_workers <= 0:
            max_workers = cls.max_workers
        max_targets = _int_env("URLCHECK_MAX_TARGETS", cls.max_targets)
        if max_targets <= 0:
            max_targets = cls.max_targets
        return cls(
            timeout=timeout,
            max_workers=max_workers,
            overall_deadline=_optional_duration_env("URLCHECK_DEADLINE", cls.overall_deadline),
            max_targets=max_targets,
            user_agent=os.getenv("URLCHECK_USER_AGENT", cls.user_agent),
            verify_ssl=_bool_env("URLCHECK_VERIFY_SSL", cls.verify_ssl),
        )


def load_settings() -> CheckerSettings:
    """Load checker settings from environment with sensible defaults."""
    return CheckerSettings.from_env()
