# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import socket
import time

import pytest

from urlcheck.checker.probe import is_probeable_url, probe_target
from urlcheck.config import CheckerSettings
from urlcheck.errors import ErrorCategory
from urlcheck.http.adapters import StubHttpClient
from urlcheck.http.httpx_client import HttpxClient
from urlcheck.http.models import HttpRequest, HttpResponse
from urlcheck.utils.cancellation import CancellationToken
from urlcheck.utils.context import check_context


def _stub(status_code, url="http://svc/"):
    return StubHttpClient({url: HttpResponse(ok=True, status_code=status_code, elapsed=0.01)})


@pytest.mark.parametrize(
    ("target", "expected"),
    [
        ("http://example.com", True),
        ("HTTPS://example.com/path?q=1", True),
        ("  http://example.com  ", True),
        ("ftp://example.com", False),
        ("example.com", False),
        ("http://", False),
        ("", False),
        ("http://[::1", False),
    ],
)
def test_is_probeable_url(target, expected):
    assert is_probeable_url(target) is expected


def test_ok_response_is_available():
    outcome = probe_target("http://svc/", timeout=1.0, http_client=_stub(200))
    assert outcome.available is True
    assert outcome.status_code == 200
    assert outcome.error is None
    assert outcome.error_category == ErrorCategory.NONE
    assert outcome.response_time == 0.01


def test_not_found_is_down_but_not_an_error():
    outcome = probe_target("http://svc/", timeout=1.0, http_client=_stub(404))
    assert outcome.available is False
    assert outcome.status_code == 404
    assert outcome.error is None


def test_redirect_status_is_final_and_available():
    client = _stub(302)
    outcome = probe_target("http://svc/", timeout=1.0, http_client=client)
    assert outcome.available is True
    assert outcome.status_code == 302
    assert client.requests[0].allow_redirects is False


def test_probe_sends_user_agent_from_context_settings():
    client = _stub(200)
    with check_context(settings=CheckerSettings(user_agent="probe-test/1")):
        probe_target("http://svc/", timeout=1.0, http_client=client)
    assert client.requests[0].headers["User-Agent"] == "probe-test/1"
    assert client.requests[0].method == "GET"


def test_malformed_target_makes_no_request():
    client = _stub(200)
    outcome = probe_target("not a url", timeout=1.0, http_client=client)
    assert outcome.available is False
    assert outcome.status_code is None
    assert outcome.error_category == ErrorCategory.MALFORMED_TARGET
    assert "not a url" in outcome.error
    assert client.requests == []


def test_cancelled_token_short_circuits():
    client = _stub(200)
    token = CancellationToken()
    token.cancel("operator abort")
    outcome = probe_target("http://svc/", timeout=1.0, token=token, http_client=client)
    assert outcome.error_category == ErrorCategory.CANCELLED
    assert "operator abort" in outcome.error
    assert client.requests == []


def test_timeout_is_capped_by_token_deadline():
    client = _stub(200)
    token = CancellationToken(deadline=0.5)
    probe_target("http://svc/", timeout=10.0, token=token, http_client=client)
    assert 0 < client.requests[0].timeout <= 0.5


def test_failure_after_deadline_is_reported_as_cancelled():
    client = StubHttpClient({"http://svc/": HttpResponse(ok=True, status_code=200)}, delay=1.0)
    token = CancellationToken(deadline=0.05)
    outcome = probe_target("http://svc/", timeout=5.0, token=token, http_client=client)
    assert outcome.error_category == ErrorCategory.CANCELLED
    assert outcome.status_code is None
    assert outcome.response_time == pytest.approx(0.05, abs=0.03)


def test_client_exception_is_recovered():
    class ExplodingClient:
        def request(self, request: HttpRequest) -> HttpResponse:  # noqa: ARG002
            raise ConnectionRefusedError("nope")

    outcome = probe_target("http://svc/", timeout=1.0, http_client=ExplodingClient())
    assert outcome.available is False
    assert outcome.error_category == ErrorCategory.CONNECTION_ERROR
    assert outcome.error == "Connection failed: nope"
    assert outcome.response_time >= 0.0


def test_probe_uses_ambient_client_and_settings():
    client = _stub(200)
    with check_context(http_client=client, settings=CheckerSettings(timeout=2.5)):
        outcome = probe_target("http://svc/")
    assert outcome.available is True
    assert client.requests[0].timeout == 2.5


def test_probe_without_any_client_raises():
    with pytest.raises(RuntimeError):
        probe_target("http://svc/", timeout=1.0)


def test_response_slower_than_timeout_is_not_available():
    slow = HttpResponse(ok=True, status_code=200, elapsed=0.8)
    outcome = probe_target("http://svc/", timeout=0.5, http_client=StubHttpClient({"http://svc/": slow}))
    assert outcome.available is False
    assert outcome.status_code is None
    assert outcome.error_category == ErrorCategory.TIMEOUT
    assert outcome.response_time == 0.8


def test_non_positive_timeout_without_token_is_a_timeout():
    client = _stub(200)
    outcome = probe_target("http://svc/", timeout=0, http_client=client)
    assert outcome.error_category == ErrorCategory.TIMEOUT
    assert "Batch cancelled" not in outcome.error
    assert client.requests == []


class TestAgainstLocalServer:
    @pytest.fixture
    def client(self):
        client = HttpxClient(CheckerSettings())
        yield client
        client.close()

    def test_ok(self, http_server, client):
        outcome = probe_target(f"{http_server.base_url}/ok", timeout=2.0, http_client=client)
        assert outcome.available is True
        assert outcome.status_code == 200
        assert outcome.error is None
        assert outcome.response_time > 0

    def test_not_found(self, http_server, client):
        outcome = probe_target(f"{http_server.base_url}/missing", timeout=2.0, http_client=client)
        assert outcome.available is False
        assert outcome.status_code == 404
        assert outcome.error is None

    def test_server_error(self, http_server, client):
        outcome = probe_target(f"{http_server.base_url}/error", timeout=2.0, http_client=client)
        assert outcome.available is False
        assert outcome.status_code == 503

    def test_redirect_not_followed(self, http_server, client):
        outcome = probe_target(f"{http_server.base_url}/redirect", timeout=2.0, http_client=client)
        assert outcome.status_code == 302
        assert outcome.available is True

    def test_slow_server_times_out(self, http_server, client):
        start = time.perf_counter()
        outcome = probe_target(f"{http_server.base_url}/slow?delay=1.5", timeout=0.2, http_client=client)
        assert time.perf_counter() - start < 1.2
        assert outcome.available is False
        assert outcome.status_code is None
        assert outcome.error_category == ErrorCategory.TIMEOUT
        assert outcome.error.startswith("Request timed out")
        assert outcome.response_time == pytest.approx(0.2, abs=0.15)

    def test_trickled_head_is_bounded_by_total_timeout(self, http_server, client):
        start = time.perf_counter()
        outcome = probe_target(f"{http_server.base_url}/trickle?lines=5&gap=0.3", timeout=0.5, http_client=client)
        assert time.perf_counter() - start < 1.0
        assert outcome.available is False
        assert outcome.status_code is None
        assert outcome.error_category == ErrorCategory.TIMEOUT
        assert outcome.response_time == pytest.approx(0.5, abs=0.3)

    def test_connection_refused(self, client):
        with socket.socket() as sock:
            sock.bind(("127.0.0.1", 0))
            port = sock.getsockname()[1]
        outcome = probe_target(f"http://127.0.0.1:{port}/", timeout=2.0, http_client=client)
        assert outcome.available is False
        assert outcome.status_code is None
        assert outcome.error_category == ErrorCategory.CONNECTION_ERROR
