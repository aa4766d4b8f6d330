# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Batch-wide cancellation signal shared by every worker thread."""

from __future__ import annotations

import threading
import time


class CancellationToken:
    """
    Thread-safe cancellation signal with an optional monotonic deadline.

    The token fires when `cancel()` is called or when the deadline passes,
    whichever comes first. Once fired it stays fired.
    """

    def __init__(self, deadline: float | None = None):
        self._event = threading.Event()
        self._deadline = time.monotonic() + deadline if deadline is not None else None
        self._reason: str | None = None
        self._lock = threading.Lock()

    @classmethod
    def with_timeout(cls, seconds: float | None) -> CancellationToken:
        return cls(deadline=seconds)

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self._fire("deadline exceeded")
            return True
        return False

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str = "cancelled by caller") -> None:
        self._fire(reason)

    def remaining(self) -> float | None:
        """Seconds until the deadline, 0.0 once fired, None when unbounded."""
        if self._event.is_set():
            return 0.0
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def cap(self, timeout: float) -> float:
        """Bound a per-request timeout by the time left on this token."""
        remaining = self.remaining()
        return timeout if remaining is None else min(timeout, remaining)

    def _fire(self, reason: str) -> None:
        with self._lock:
            if not self._event.is_set():
                self._reason = reason
                self._event.set()


__all__ = ["CancellationToken"]
