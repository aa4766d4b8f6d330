# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl
from enum import Enum

import httpx


class ErrorCategory(str, Enum):
    MALFORMED_TARGET = "MALFORMED_TARGET"
    TIMEOUT = "TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    CANCELLED = "CANCELLED"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


class UrlCheckError(Exception):
    """Base class for errors surfaced to urlcheck callers."""


class ConfigurationError(UrlCheckError):
    """Batch parameters are unusable; raised before any target is dispatched."""


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.

    DNS failures, refusals, resets and TLS failures all surface from httpx as
    transport errors and are reported together as CONNECTION_ERROR.
    """
    if isinstance(exc, (httpx.InvalidURL, httpx.UnsupportedProtocol, httpx.LocalProtocolError)):
        return ErrorCategory.MALFORMED_TARGET

    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, httpx.TransportError):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (TimeoutError, socket.timeout)):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, (socket.gaierror, socket.herror, ssl.SSLError, ConnectionError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.MALFORMED_TARGET: "Malformed target URL",
        ErrorCategory.TIMEOUT: "Request timed out",
        ErrorCategory.CONNECTION_ERROR: "Connection failed",
        ErrorCategory.CANCELLED: "Batch cancelled before probe completed",
        ErrorCategory.UNKNOWN_ERROR: "Request failed",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "Request failed")


def describe_failure(category: ErrorCategory, detail: str | None = None) -> str:
    """Combine the category reason with the low-level detail, if any."""
    reason = error_category_to_reason(category) or "Request failed"
    detail = (detail or "").strip()
    return f"{reason}: {detail}" if detail else reason


__all__ = [
    "ConfigurationError",
    "ErrorCategory",
    "UrlCheckError",
    "categorize_exception",
    "describe_failure",
    "error_category_to_reason",
]
