# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Batch coordinator: sizes the worker pool, runs it, and collects every outcome."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

from ..config import CheckerSettings, load_settings
from ..errors import ConfigurationError, ErrorCategory
from ..http.client import HttpClient, create_default_http_client
from ..models import BatchRequest, BatchResult, BatchState, ProbeOutcome
from ..utils.cancellation import CancellationToken
from ..utils.context import check_context, get_check_context
from .pool import JobQueue, ResultCollector, WorkerPool
from .probe import probe_target

logger = logging.getLogger(__name__)

# (target, timeout, token) -> outcome; the default issues a real request.
TargetProbe = Callable[[str, float, CancellationToken], ProbeOutcome]


def validate_request(request: BatchRequest) -> None:
    """Reject unusable batch parameters before anything is dispatched."""
    if request.max_workers < 1:
        raise ConfigurationError(f"max_workers must be at least 1, got {request.max_workers}")
    if request.timeout <= 0:
        raise ConfigurationError(f"timeout must be positive, got {request.timeout}")
    if request.overall_deadline is not None and request.overall_deadline < 0:
        raise ConfigurationError(f"overall_deadline must not be negative, got {request.overall_deadline}")


class _BatchRun:
    """Lifecycle state of one batch; each `run()` call gets its own."""

    def __init__(self) -> None:
        self.state = BatchState.IDLE

    def transition(self, state: BatchState) -> None:
        if state is not self.state:
            logger.debug("batch state %s -> %s", self.state.value, state.value)
        self.state = state


class BatchCoordinator:
    """
    Runs batches through a bounded worker pool.

    Each batch walks IDLE -> DISPATCHING -> DRAINING -> COMPLETE. Dispatch
    stops when the queue is exhausted or the cancellation token fires; probes
    already in flight are left to their own timeout. Targets that were never
    dispatched are reported as CANCELLED, so a batch always yields exactly one
    outcome per submitted target. Per-batch state lives in the run itself, so
    one coordinator may serve concurrent `run()` calls.
    """

    poll_interval = 0.05

    def __init__(
        self,
        http_client: HttpClient | None = None,
        settings: CheckerSettings | None = None,
        probe: TargetProbe | None = None,
    ):
        self.settings = settings or load_settings()
        self.http_client = http_client
        self._probe = probe

    def run(self, request: BatchRequest, *, token: CancellationToken | None = None) -> BatchResult:
        """
        Probe every target in `request` and return the collected outcomes.

        A caller-supplied `token` replaces the one derived from
        `request.overall_deadline`, letting the caller cancel explicitly.
        """
        started = time.perf_counter()
        batch = _BatchRun()

        targets = list(request.targets)
        if not targets:
            batch.transition(BatchState.COMPLETE)
            return BatchResult(total_elapsed=time.perf_counter() - started)

        validate_request(request)
        token = token or CancellationToken(deadline=request.overall_deadline)
        worker_count = request.effective_worker_count

        client = self.http_client or get_check_context().http_client
        owns_client = client is None
        if owns_client:
            client = create_default_http_client(self.settings)

        jobs = JobQueue(targets)
        collector = ResultCollector(worker_count)
        pool = WorkerPool(worker_count, self._bind_probe(request.timeout, client))

        logger.info(
            "checking %d target(s) with %d worker(s), timeout=%.2fs deadline=%s",
            jobs.size,
            worker_count,
            request.timeout,
            "none" if request.overall_deadline is None else f"{request.overall_deadline:.2f}s",
        )
        try:
            with check_context(http_client=client, settings=self.settings, token=token):
                batch.transition(BatchState.DISPATCHING)
                pool.start(jobs, collector, token)
                self._await_workers(batch, jobs, collector, token)
            pool.join()
        finally:
            if owns_client:
                client.close()

        undispatched = jobs.drain()
        for target in undispatched:
            collector.add(ProbeOutcome.failed(target, ErrorCategory.CANCELLED, token.reason))
        if undispatched:
            logger.warning("%d target(s) not dispatched: %s", len(undispatched), token.reason)

        outcomes = collector.outcomes()
        batch.transition(BatchState.COMPLETE)
        result = BatchResult(
            outcomes=outcomes,
            total_elapsed=time.perf_counter() - started,
            cancelled=any(outcome.error_category is ErrorCategory.CANCELLED for outcome in outcomes),
            worker_count=worker_count,
            peak_concurrency=pool.peak_active,
        )
        logger.info(
            "checked %d target(s) in %.3fs: %d available",
            result.total_checked,
            result.total_elapsed,
            result.total_available,
        )
        return result

    def _bind_probe(self, timeout: float, client: HttpClient) -> Callable[[str, CancellationToken], ProbeOutcome]:
        custom = self._probe
        if custom is not None:
            return lambda target, token: custom(target, timeout, token)
        return lambda target, token: probe_target(target, timeout=timeout, token=token, http_client=client)

    def _await_workers(
        self, batch: _BatchRun, jobs: JobQueue, collector: ResultCollector, token: CancellationToken
    ) -> None:
        while not collector.wait(self.poll_interval):
            if batch.state is BatchState.DISPATCHING and (jobs.empty() or token.cancelled):
                if token.cancelled:
                    logger.warning("batch cancelled (%s); waiting for in-flight probes", token.reason)
                batch.transition(BatchState.DRAINING)
        if batch.state is BatchState.DISPATCHING:
            batch.transition(BatchState.DRAINING)


def run_batch(
    targets: Sequence[str],
    timeout: float,
    max_workers: int,
    overall_deadline: float | None = None,
    *,
    http_client: HttpClient | None = None,
    token: CancellationToken | None = None,
    settings: CheckerSettings | None = None,
) -> BatchResult:
    """Check `targets` concurrently; see BatchCoordinator.run."""
    request = BatchRequest(
        targets=targets,
        timeout=timeout,
        max_workers=max_workers,
        overall_deadline=overall_deadline,
    )
    return BatchCoordinator(http_client=http_client, settings=settings).run(request, token=token)


__all__ = ["BatchCoordinator", "TargetProbe", "run_batch", "validate_request"]
