# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for urlcheck."""

from ..http.models import Headers, HttpRequest, HttpResponse
from .batch import BatchRequest, BatchResult, BatchState
from .probe import AVAILABLE_STATUS_RANGE, ProbeOutcome

__all__ = [
    "AVAILABLE_STATUS_RANGE",
    "BatchRequest",
    "BatchResult",
    "BatchState",
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "ProbeOutcome",
]
