import sys
from pathlib import Path

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[2]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from review_site.commands import build  # noqa: E402


def test_build_writes_every_route_and_404(config_file, store, data_dir):
    result = build.run(str(config_file), store=store)

    out = Path(result['output_dir'])
    assert out == data_dir.resolve() / "site"
    assert (out / "index.html").exists()
    assert (out / "kitchen" / "index.html").exists()
    assert (out / "kitchen" / "best-chef-knives" / "index.html").exists()
    assert (out / "blog" / "tag" / "knives" / "index.html").exists()
    assert (out / "blog" / "knife-care-101" / "index.html").exists()
    assert (out / "404.html").exists()
    assert not (out / "blog" / "draft-post").exists()

    assert "/" in result['pages']
    assert result['failed'] == []
    assert set(result['not_found']) == {
        "/kitchen/budget-knife-sets",
        "/people/missing-page",
        "/blog/first-kitchen",
        "/blog/coffee-tour",
    }
    assert "Page Not Found" in (out / "people" / "missing-page" / "index.html").read_text(encoding="utf-8")


def test_build_one_category_into_custom_output(config_file, store, tmp_path):
    target = tmp_path / "public"

    result = build.run(str(config_file), category="travel", output_dir=str(target), store=store)

    assert result['pages'] == ["/travel", "/travel/best-cafes"]
    assert (target / "travel" / "best-cafes" / "index.html").exists()
    assert (target / "404.html").exists()
    assert not (target / "index.html").exists()


def test_build_unknown_category_raises(config_file, store):
    with pytest.raises(ValueError, match="Unknown category"):
        build.run(str(config_file), category="nope", store=store)


def test_build_records_failed_routes(config_file, store, data_dir, monkeypatch):
    from review_site.processors.site_renderer import SiteRenderer

    original = SiteRenderer.category_page

    def flaky(self, category_id):
        if category_id == "travel":
            raise RuntimeError("boom")
        return original(self, category_id)

    monkeypatch.setattr(SiteRenderer, "category_page", flaky)

    result = build.run(str(config_file), store=store)

    assert result['failed'] == ["/travel"]
    assert "/travel" not in result['not_found']
    assert "/travel" in result['pages']


def test_build_closes_store(config_file, store, fake_http):
    build.run(str(config_file), category="garden", store=store)
    assert fake_http.closed


def test_build_keeps_going_when_a_route_cannot_be_written(config_file, store, data_dir, monkeypatch):
    from review_site.processors.site_renderer import SiteRenderer

    monkeypatch.setattr(SiteRenderer, "static_routes", lambda self, category_id=None: ["/", "/blog/tag/..", "/blog"])

    result = build.run(str(config_file), store=store)

    out = Path(result['output_dir'])
    assert result['failed'] == ["/blog/tag/.."]
    assert result['pages'] == ["/", "/blog"]
    assert (out / "blog" / "index.html").exists()
    assert (out / "404.html").exists()


def test_build_site_with_unusual_tags(config_file, data_dir, tmp_path):
    import json

    from conftest import BASE_URL, SITE_ID, FakeHTTPClient
    from review_site.core.content_store import ContentStore

    site_dir = tmp_path / "content" / SITE_ID
    site_dir.mkdir(parents=True)
    (site_dir / "site-config.json").write_text(json.dumps({
        "site_id": SITE_ID,
        "categories": [],
        "articles": [
            {"article_slug": "a", "article_title": "A", "status": "published", "tags": ["how-to/basics", "C#", ".."]},
        ],
    }), encoding="utf-8")
    store = ContentStore(BASE_URL, SITE_ID, FakeHTTPClient(root=tmp_path / "content"))

    result = build.run(str(config_file), store=store)

    out = Path(result['output_dir'])
    assert result['failed'] == []
    assert (out / "blog" / "tag" / "how-to-basics" / "index.html").exists()
    assert (out / "blog" / "tag" / "c" / "index.html").exists()
    assert "/blog/tag/.." not in result['pages']
