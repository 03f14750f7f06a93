"""Tests for the retrying HTTP client (no network: the session is faked)."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
import requests

# Ensure the repository's src/ directory is importable without installation.
REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from review_site.core import http_client  # noqa: E402
from review_site.core.http_client import RetryableHTTPClient  # noqa: E402


def _response(status, headers=None):
    r = requests.Response()
    r.status_code = status
    r.headers.update(headers or {})
    r.url = "https://content.test/x"
    return r


class FakeSession:
    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0
        self.headers = {}

    def get(self, url, **kwargs):
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self):
        pass


@pytest.fixture
def sleeps(monkeypatch):
    recorded = []
    monkeypatch.setattr(http_client.time, "sleep", recorded.append)
    return recorded


def _client(outcomes, attempts=3):
    client = RetryableHTTPClient(rps=1000, max_retries=attempts)
    client.session = FakeSession(outcomes)
    return client


def test_not_found_returns_none(sleeps):
    client = _client([_response(404)])
    assert client.get_with_retry("https://content.test/x") is None
    assert client.session.calls == 1


def test_server_errors_are_retried_then_succeed(sleeps):
    client = _client([_response(503), _response(429, {"Retry-After": "3"}), _response(200)])

    response = client.get_with_retry("https://content.test/x")

    assert response.status_code == 200
    assert client.session.calls == 3
    assert [s for s in sleeps if s >= 1.0] == [1.0, 3.0]


def test_exhausted_retries_raise_http_error(sleeps):
    client = _client([_response(500), _response(500)], attempts=2)

    with pytest.raises(requests.HTTPError):
        client.get_with_retry("https://content.test/x")


def test_client_errors_are_not_retried(sleeps):
    client = _client([_response(403)])

    with pytest.raises(requests.HTTPError):
        client.get_with_retry("https://content.test/x")
    assert client.session.calls == 1


def test_connection_errors_retry_then_raise(sleeps):
    client = _client([requests.ConnectionError("down"), requests.ConnectionError("down")], attempts=2)

    with pytest.raises(requests.ConnectionError):
        client.get_with_retry("https://content.test/x")
    assert client.session.calls == 2


def test_backoff_is_capped_and_honors_retry_after():
    assert RetryableHTTPClient.backoff_seconds(0) == 1.0
    assert RetryableHTTPClient.backoff_seconds(10) == 8.0
    assert RetryableHTTPClient.backoff_seconds(0, "0.2") == 1.0
    assert RetryableHTTPClient.backoff_seconds(1, "soon") == 2.0


def test_zero_retries_still_makes_one_attempt():
    assert RetryableHTTPClient(max_retries=0).attempts == 1
