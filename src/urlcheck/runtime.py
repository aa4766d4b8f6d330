# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level urlcheck facade for batch and single-URL checks."""

from __future__ import annotations

from collections.abc import Iterable
from contextlib import suppress

from .checker.coordinator import BatchCoordinator
from .checker.probe import probe_target
from .config import CheckerSettings, load_settings
from .errors import ConfigurationError
from .http.client import HttpClient, create_default_http_client
from .models import BatchRequest, BatchResult, ProbeOutcome
from .utils.cancellation import CancellationToken
from .utils.context import check_context

_UNSET = object()


class UrlChecker:
    """
    Convenience wrapper that wires one shared HTTP client into the coordinator.

    Per-call arguments override the loaded settings; anything left out falls
    back to CheckerSettings. Runs one batch at a time.
    """

    def __init__(self, http_client: HttpClient | None = None, settings: CheckerSettings | None = None):
        self.settings = settings or load_settings()
        self.http_client = http_client or create_default_http_client(self.settings)
        self.coordinator = BatchCoordinator(self.http_client, self.settings)

    def check(
        self,
        urls: Iterable[str],
        *,
        timeout: float | None = None,
        max_workers: int | None = None,
        overall_deadline: float | None | object = _UNSET,
        token: CancellationToken | None = None,
    ) -> BatchResult:
        deadline = self.settings.overall_deadline if overall_deadline is _UNSET else overall_deadline
        request = BatchRequest(
            targets=urls,  # type: ignore[arg-type]
            timeout=timeout if timeout is not None else self.settings.timeout,
            max_workers=max_workers if max_workers is not None else self.settings.max_workers,
            overall_deadline=deadline,  # type: ignore[arg-type]
        )
        if len(request.targets) > self.settings.max_targets:
            raise ConfigurationError(
                f"maximum {self.settings.max_targets} URLs allowed per batch, got {len(request.targets)}"
            )
        with check_context(http_client=self.http_client, settings=self.settings):
            return self.coordinator.run(request, token=token)

    def check_one(self, url: str, *, timeout: float | None = None) -> ProbeOutcome:
        with check_context(http_client=self.http_client, settings=self.settings):
            return probe_target(url, timeout=timeout)

    def close(self) -> None:
        with suppress(Exception):
            if hasattr(self.http_client, "close"):
                self.http_client.close()

    def __enter__(self) -> UrlChecker:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()
