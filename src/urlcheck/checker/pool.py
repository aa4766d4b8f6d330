# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Job queue, worker pool and result collector.

A fixed number of worker threads drain one shared queue of targets. Each
worker checks the cancellation token before taking the next target, so a
fired token stops new dispatch while probes already in flight finish on their
own timeout. Outcomes are appended to a lock-protected collector that sets a
completion event when the last worker exits.
"""

from __future__ import annotations

import contextvars
import logging
import queue
import threading
from collections.abc import Callable, Iterable

from ..errors import ConfigurationError, ErrorCategory
from ..models import ProbeOutcome
from ..utils.cancellation import CancellationToken

logger = logging.getLogger(__name__)

ProbeFn = Callable[[str, CancellationToken], ProbeOutcome]


class JobQueue:
    """Ordered, thread-safe supply of targets, filled once up front."""

    def __init__(self, targets: Iterable[str]):
        self._queue: queue.SimpleQueue[str] = queue.SimpleQueue()
        self._size = 0
        for target in targets:
            self._queue.put(target)
            self._size += 1

    @property
    def size(self) -> int:
        """Number of targets the queue was filled with."""
        return self._size

    def empty(self) -> bool:
        return self._queue.empty()

    def take(self) -> str | None:
        """Next target, or None once the supply is exhausted."""
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    def drain(self) -> list[str]:
        """Remove and return every target nobody has taken yet."""
        remaining: list[str] = []
        while (target := self.take()) is not None:
            remaining.append(target)
        return remaining


class ResultCollector:
    """Unordered sink for outcomes with an explicit all-workers-done signal."""

    def __init__(self, workers: int):
        self._lock = threading.Lock()
        self._outcomes: list[ProbeOutcome] = []
        self._live_workers = workers
        self._done = threading.Event()
        if workers <= 0:
            self._done.set()

    def add(self, outcome: ProbeOutcome) -> None:
        with self._lock:
            self._outcomes.append(outcome)

    def worker_finished(self) -> None:
        with self._lock:
            self._live_workers -= 1
            if self._live_workers <= 0:
                self._done.set()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until every worker has finished; False if `timeout` elapsed first."""
        return self._done.wait(timeout)

    def outcomes(self) -> list[ProbeOutcome]:
        with self._lock:
            return list(self._outcomes)

    def __len__(self) -> int:
        with self._lock:
            return len(self._outcomes)


class WorkerPool:
    """Fixed-size set of threads running `probe` over a JobQueue."""

    def __init__(self, size: int, probe: ProbeFn, *, name: str = "urlcheck-worker"):
        if size < 1:
            raise ConfigurationError(f"worker pool size must be at least 1, got {size}")
        self.size = size
        self._probe = probe
        self._name = name
        self._threads: list[threading.Thread] = []
        self._lock = threading.Lock()
        self._active = 0
        self.peak_active = 0

    def start(self, jobs: JobQueue, collector: ResultCollector, token: CancellationToken) -> None:
        for index in range(self.size):
            # Each thread needs its own copy; a Context cannot be entered twice at once.
            context = contextvars.copy_context()
            thread = threading.Thread(
                target=context.run,
                args=(self._work, jobs, collector, token),
                name=f"{self._name}-{index}",
                daemon=True,
            )
            self._threads.append(thread)
            thread.start()

    def join(self, timeout: float | None = None) -> None:
        for thread in self._threads:
            thread.join(timeout)

    def _work(self, jobs: JobQueue, collector: ResultCollector, token: CancellationToken) -> None:
        try:
            while not token.cancelled:
                target = jobs.take()
                if target is None:
                    break
                collector.add(self._run_probe(target, token))
        finally:
            collector.worker_finished()

    def _run_probe(self, target: str, token: CancellationToken) -> ProbeOutcome:
        with self._lock:
            self._active += 1
            self.peak_active = max(self.peak_active, self._active)
        try:
            return self._probe(target, token)
        except Exception as exc:  # noqa: BLE001
            logger.exception("probe for %s raised; recording as failed", target)
            return ProbeOutcome.failed(target, ErrorCategory.UNKNOWN_ERROR, str(exc) or type(exc).__name__)
        finally:
            with self._lock:
                self._active -= 1


__all__ = ["JobQueue", "ProbeFn", "ResultCollector", "WorkerPool"]
