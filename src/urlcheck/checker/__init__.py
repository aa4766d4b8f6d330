# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Concurrent dispatch engine: probe, worker pool and batch coordinator."""

from .coordinator import BatchCoordinator, run_batch, validate_request
from .pool import JobQueue, ResultCollector, WorkerPool
from .probe import is_probeable_url, probe_target

__all__ = [
    "BatchCoordinator",
    "JobQueue",
    "ResultCollector",
    "WorkerPool",
    "is_probeable_url",
    "probe_target",
    "run_batch",
    "validate_request",
]
