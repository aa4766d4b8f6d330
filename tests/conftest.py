# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs, urlsplit

import pytest

_PROXY_VARS = ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy")


class _Handler(BaseHTTPRequestHandler):
    def do_GET(self):  # noqa: N802
        parts = urlsplit(self.path)
        query = parse_qs(parts.query)
        if parts.path == "/ok":
            self._reply(200)
        elif parts.path == "/missing":
            self._reply(404)
        elif parts.path == "/error":
            self._reply(503)
        elif parts.path == "/redirect":
            self._reply(302, {"Location": "/missing"})
        elif parts.path == "/slow":
            time.sleep(float(query.get("delay", ["1"])[0]))
            self._reply(200)
        elif parts.path == "/trickle":
            self._trickle(int(query.get("lines", ["5"])[0]), float(query.get("gap", ["0.3"])[0]))
        elif parts.path == "/agent":
            self.server.seen_agents.append(self.headers.get("User-Agent"))
            self._reply(204)
        else:
            self._reply(404)

    def _reply(self, status, headers=None):
        body = b"" if status in (204, 304) else b"ok"
        try:
            self.send_response(status)
            for key, value in (headers or {}).items():
                self.send_header(key, value)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)
        except (BrokenPipeError, ConnectionResetError):
            # Client gave up (probe timeout).
            pass

    def _trickle(self, lines, gap):
        # Each header line arrives well inside a per-read timeout; the head as a whole does not.
        try:
            self.wfile.write(b"HTTP/1.1 200 OK\r\n")
            for index in range(lines):
                time.sleep(gap)
                self.wfile.write(f"X-Slow-{index}: {index}\r\n".encode())
            self.wfile.write(b"Content-Length: 0\r\nConnection: close\r\n\r\n")
        except (BrokenPipeError, ConnectionResetError):
            pass

    def log_message(self, *_args):  # noqa: D401
        return None


@pytest.fixture(autouse=True)
def _no_proxy_env(monkeypatch):
    for name in _PROXY_VARS:
        monkeypatch.delenv(name, raising=False)
    for name in ("URLCHECK_TIMEOUT", "URLCHECK_MAX_WORKERS", "URLCHECK_DEADLINE", "URLCHECK_MAX_TARGETS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def http_server():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    server.daemon_threads = True
    server.seen_agents = []
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address[:2]
    server.base_url = f"http://{host}:{port}"
    try:
        yield server
    finally:
        server.shutdown()
        server.server_close()
