"""CLI tests using click's CliRunner with the fixture content store."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
from click.testing import CliRunner

# Ensure the repository's src/ directory is importable without installation.
REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from conftest import FakeHTTPClient  # noqa: E402
import review_site  # noqa: E402
from review_site.cli import cli  # noqa: E402
from review_site.core import command_context  # noqa: E402


@pytest.fixture
def offline(monkeypatch):
    """Serve the content store from the fixtures instead of the network."""
    monkeypatch.setattr(command_context, "RetryableHTTPClient", lambda **kwargs: FakeHTTPClient())


def test_status_reports_configuration(config_file):
    result = CliRunner().invoke(cli, ["--config", str(config_file), "status"])

    assert result.exit_code == 0
    assert "Configuration is valid" in result.output
    assert "https://content.test" in result.output
    assert "demo-site" in result.output


def test_status_reports_invalid_configuration(tmp_path, data_dir):
    config_path = tmp_path / "broken.yaml"
    config_path.write_text("content:\n  base_url: \"not-a-url\"\n  site_id: \"s\"\n", encoding="utf-8")

    result = CliRunner().invoke(cli, ["--config", str(config_path), "status"])

    assert "Configuration validation failed" in result.output


def test_render_prints_html(config_file, offline):
    result = CliRunner().invoke(cli, ["--config", str(config_file), "render", "/kitchen"])

    assert result.exit_code == 0
    assert "Kitchen Gear" in result.output


def test_render_unknown_route_still_prints_not_found_page(config_file, offline):
    result = CliRunner().invoke(cli, ["--config", str(config_file), "render", "/nope"])

    assert result.exit_code == 0
    assert "Page Not Found" in result.output


def test_build_and_stats_commands(config_file, offline, tmp_path):
    target = tmp_path / "public"
    runner = CliRunner()

    built = runner.invoke(cli, ["--config", str(config_file), "build", "--category", "kitchen", "--output", str(target)])
    assert built.exit_code == 0
    assert "Built 3 pages" in built.output
    assert "/kitchen/budget-knife-sets" in built.output
    assert (target / "kitchen" / "index.html").exists()

    report = runner.invoke(cli, ["--config", str(config_file), "stats", "--category", "travel"])
    assert report.exit_code == 0
    data = json.loads(report.output)
    assert data["categories"][0]["categoryId"] == "travel"


def test_build_unknown_category_exits_with_error(config_file, offline):
    result = CliRunner().invoke(cli, ["--config", str(config_file), "build", "--category", "nope"])

    assert result.exit_code == 1


def test_python_api(config_file, offline):
    html = review_site.render("/blog", config_path=str(config_file))
    assert "Knife Care 101" in html

    info = review_site.status(config_path=str(config_file))
    assert info["valid"] is True
    assert info["content"]["site_id"] == "demo-site"

    missing = review_site.status(config_path=str(config_file.parent / "missing.yaml"))
    assert missing["valid"] is False
    assert "not found" in missing["error"]
