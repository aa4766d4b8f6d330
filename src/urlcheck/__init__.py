# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
urlcheck package entrypoint.

This package checks batches of URLs for availability through a bounded pool
of worker threads, reporting status code and latency per URL. HTTP behavior
is abstracted behind an injectable client interface, and results are modeled
with typed dataclasses.
"""

from .checker import BatchCoordinator, probe_target, run_batch
from .config import CheckerSettings, load_settings
from .errors import ConfigurationError, ErrorCategory, UrlCheckError
from .http import (
    HttpClient,
    HttpRequest,
    HttpResponse,
    HttpxClient,
    StubHttpClient,
    create_default_http_client,
)
from .log import setup_logging
from .models import BatchRequest, BatchResult, BatchState, ProbeOutcome
from .runtime import UrlChecker
from .utils import CancellationToken
from .version import __version__

__all__ = [
    "BatchCoordinator",
    "BatchRequest",
    "BatchResult",
    "BatchState",
    "CancellationToken",
    "CheckerSettings",
    "ConfigurationError",
    "ErrorCategory",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpxClient",
    "ProbeOutcome",
    "StubHttpClient",
    "UrlCheckError",
    "UrlChecker",
    "create_default_http_client",
    "load_settings",
    "probe_target",
    "run_batch",
    "setup_logging",
    "__version__",
]
