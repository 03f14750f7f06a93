"""Shared fixtures: an isolated data dir and a content store served from tests/fixtures."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
import requests

# Ensure the repository's src/ directory is importable without installation.
REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from review_site.core.content_store import ContentStore  # noqa: E402

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"
BASE_URL = "https://content.test"
SITE_ID = "demo-site"


class FakeResponse:
    def __init__(self, text: str):
        self.text = text
        self.status_code = 200

    def json(self):
        return json.loads(self.text)


class FakeHTTPClient:
    """Serves ``{BASE_URL}/<path>`` from ``FIXTURES_DIR/<path>``; missing files act as 404."""

    def __init__(self, root: Path = FIXTURES_DIR, fail_urls=()):
        self.root = root
        self.fail_urls = set(fail_urls)
        self.requested = []
        self.closed = False

    def get_with_retry(self, url, **kwargs):
        self.requested.append(url)
        if url in self.fail_urls:
            raise requests.ConnectionError(f"connection refused: {url}")
        relative = url[len(BASE_URL):].lstrip('/')
        path = self.root / relative
        if not path.is_file():
            return None
        return FakeResponse(path.read_text(encoding='utf-8'))

    def close(self):
        self.closed = True


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point the runtime data directory at a temporary folder."""
    target = tmp_path / "data"
    monkeypatch.setenv("REVIEW_SITE_DATA_DIR", str(target))
    monkeypatch.delenv("CONTENT_BASE_URL", raising=False)
    monkeypatch.delenv("SITE_ID", raising=False)
    return target


@pytest.fixture
def fake_http():
    return FakeHTTPClient()


@pytest.fixture
def store(fake_http):
    return ContentStore(BASE_URL, SITE_ID, fake_http)


@pytest.fixture
def config_file(tmp_path, data_dir):
    """A valid config pointing at the fixture content store."""
    path = tmp_path / "config.yaml"
    path.write_text(
        (
            "content:\n"
            f"  base_url: \"{BASE_URL}\"\n"
            f"  site_id: \"{SITE_ID}\"\n"
            "http:\n"
            "  timeout: 5\n"
            "  max_retries: 0\n"
            "  rps: 100\n"
            "output:\n"
            "  directory: \"site\"\n"
            "  template: \"site_template.html\"\n"
        ),
        encoding="utf-8",
    )
    return path
