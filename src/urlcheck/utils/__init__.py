# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Shared utilities."""

from .cancellation import CancellationToken
from .context import CheckContext, check_context, get_check_context, get_http_client, get_settings

__all__ = [
    "CancellationToken",
    "CheckContext",
    "check_context",
    "get_check_context",
    "get_http_client",
    "get_settings",
]
