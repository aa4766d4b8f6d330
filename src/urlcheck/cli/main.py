# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""urlcheck CLI."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Iterable
from typing import Any, TextIO

from ..config import CheckerSettings, load_settings, parse_duration
from ..errors import ConfigurationError
from ..http import create_default_http_client
from ..log import setup_logging
from ..models import BatchResult
from ..runtime import UrlChecker

CLI_ERROR_TRUNCATION_BYTES = 200


def _duration_arg(raw: str) -> float:
    try:
        return parse_duration(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _positive_int_arg(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer: {raw!r}") from exc
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Check a batch of URLs concurrently for availability")
    parser.add_argument("urls", nargs="*", help="URLs to check")
    parser.add_argument(
        "-f",
        "--file",
        type=argparse.FileType("r"),
        help="Read URLs from a file, one per line ('-' for stdin; '#' starts a comment)",
    )
    parser.add_argument("--timeout", type=_duration_arg, help="Per-request timeout, e.g. 5, 500ms, 10s")
    parser.add_argument("--workers", type=_positive_int_arg, help="Maximum concurrent requests")
    parser.add_argument(
        "--deadline",
        type=_duration_arg,
        help="Deadline for the whole batch; 0 disables it",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output JSON instead of human-friendly summary",
    )
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (useful for lab/self-signed targets)",
    )
    parser.add_argument("--log-level", help="Log level (debug, info, warn, error)")
    return parser


def read_url_lines(stream: TextIO) -> list[str]:
    """Parse one URL per line, skipping blanks and '#' comment lines."""
    urls: list[str] = []
    for line in stream:
        stripped = line.strip()
        # Only whole-line comments; '#' inside a URL is a fragment.
        if stripped and not stripped.startswith("#"):
            urls.append(stripped)
    return urls


def collect_urls(args: argparse.Namespace) -> list[str]:
    urls = list(args.urls or [])
    if args.file is not None:
        try:
            urls.extend(read_url_lines(args.file))
        finally:
            if args.file is not sys.stdin:
                args.file.close()
    return urls


def _truncate_text_bytes(text: str, max_bytes: int) -> str:
    raw = text.encode("utf-8")
    if len(raw) <= max_bytes:
        return text
    suffix = "..."
    keep = max(0, max_bytes - len(suffix))
    return raw[:keep].decode("utf-8", errors="ignore") + suffix


def _print_json(data: dict[str, Any] | Any) -> None:
    payload = data.to_dict() if hasattr(data, "to_dict") else data
    json.dump(payload, sys.stdout, indent=2, sort_keys=True)
    sys.stdout.write("\n")


def _outcome_lines(result: BatchResult) -> Iterable[str]:
    for outcome in result.outcomes:
        if outcome.available:
            label = "UP"
        elif outcome.error is None:
            label = "DOWN"
        else:
            label = "FAIL"
        status = str(outcome.status_code) if outcome.status_code is not None else "-"
        line = f"  {label:<4} {status:>3} {outcome.response_time_ms:>6}ms  {outcome.target}"
        if outcome.error:
            line += f"  ({_truncate_text_bytes(outcome.error, CLI_ERROR_TRUNCATION_BYTES)})"
        yield line


def _pretty_print(result: BatchResult) -> None:
    unavailable = result.total_checked - result.total_available
    print(
        f"[urlcheck] Checked {result.total_checked} URLs in {result.total_time_ms}ms"
        f" | Available: {result.total_available} | Unavailable: {unavailable}"
    )
    if result.cancelled:
        print("Batch deadline reached; some targets were not checked.")
    for line in _outcome_lines(result):
        print(line)


def _apply_overrides(settings: CheckerSettings, args: argparse.Namespace) -> CheckerSettings:
    if args.ignore_ssl_errors:
        settings.verify_ssl = False
    if args.deadline is not None:
        settings.overall_deadline = args.deadline if args.deadline > 0 else None
    return settings


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    urls = collect_urls(args)
    if not urls:
        parser.error("no URLs given; pass them as arguments or with --file")

    settings = _apply_overrides(load_settings(), args)
    http_client = create_default_http_client(settings)

    try:
        with UrlChecker(http_client=http_client, settings=settings) as checker:
            result = checker.check(urls, timeout=args.timeout, max_workers=args.workers)
    except ConfigurationError as exc:
        parser.error(str(exc))

    if args.json:
        _print_json(result)
    else:
        _pretty_print(result)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
