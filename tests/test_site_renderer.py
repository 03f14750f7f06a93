"""Tests for route resolution and page rendering against the demo site fixture."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

# Ensure the repository's src/ directory is importable without installation.
REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from conftest import BASE_URL, SITE_ID, FakeHTTPClient  # noqa: E402
from review_site.core.content_store import ContentStore  # noqa: E402
from review_site.processors.html_generator import HTMLGenerator  # noqa: E402
from review_site.processors.site_renderer import SiteRenderer, normalize_path  # noqa: E402


@pytest.fixture
def renderer(store, data_dir):
    return SiteRenderer(store, HTMLGenerator())


@pytest.mark.parametrize(
    "path",
    [
        "/",
        "/kitchen",
        "/garden",
        "/kitchen/best-chef-knives",
        "/travel/best-cafes",
        "/people/top-chefs",
        "/blog",
        "/blog/tag/knives",
        "/blog/knife-care-101",
    ],
)
def test_known_routes_render(renderer, path):
    result = renderer.render(path)

    assert result.status == 200
    assert result.path == path
    assert result.html.startswith("<!DOCTYPE html>")
    assert "%{" not in result.html


@pytest.mark.parametrize(
    "path",
    [
        "/nope",
        "/kitchen/nope",
        "/kitchen/budget-knife-sets",
        "/people/missing-page",
        "/blog/draft-post",
        "/blog/first-kitchen",
        "/blog/tag/secret",
        "/a/b/c",
        "/blog/tag/knives/extra",
    ],
)
def test_unresolvable_routes_render_not_found(renderer, path):
    result = renderer.render(path)

    assert result.status == 404
    assert "Page Not Found" in result.html
    assert "Demo Reviews" in result.html


def test_normalize_path():
    assert normalize_path("") == "/"
    assert normalize_path("kitchen/") == "/kitchen"
    assert normalize_path("/kitchen//best-chef-knives/?ref=x#top") == "/kitchen/best-chef-knives"


def test_static_routes_cover_site_and_skip_drafts(renderer):
    routes = renderer.static_routes()

    assert routes[:2] == ["/", "/blog"]
    assert "/kitchen/best-chef-knives" in routes
    assert "/people/missing-page" in routes
    assert "/garden" in routes
    assert routes.index("/blog/first-kitchen") < routes.index("/blog/knife-care-101") < routes.index("/blog/coffee-tour")
    assert "/blog/draft-post" not in routes
    assert "/blog/tag/secret" not in routes
    assert [r for r in routes if r.startswith("/blog/tag/")] == [
        "/blog/tag/beginners",
        "/blog/tag/knives",
        "/blog/tag/maintenance",
        "/blog/tag/travel",
    ]


def test_static_routes_for_one_category(renderer):
    assert renderer.static_routes("kitchen") == [
        "/kitchen",
        "/kitchen/best-chef-knives",
        "/kitchen/budget-knife-sets",
    ]
    assert renderer.static_routes("unknown") == []


def test_document_carries_theme_and_chrome(renderer):
    html = renderer.render("/").html

    assert "<title>Demo Reviews</title>" in html
    assert "--color-primary: #0f766e;" in html
    assert "--font-heading: Merriweather" in html
    assert "family=Source+Sans+Pro" in html
    assert "Independent testing" in html
    assert "Our Promise" in html
    assert "Updated monthly" in html
    assert "qualifying purchases" in html


def test_home_page_sections(renderer):
    html = renderer.render("/").html

    assert "hero--left hero--bg-gradient" in html
    assert "Updated weekly" in html
    assert "Find the <em>right</em> gear" in html
    assert "195+" in html
    assert "Expert Picks" in html
    assert "Explore Our Guides" in html
    assert 'href="/garden"' in html
    assert "Getting Started" in html
    assert html.index('href="/blog/first-kitchen"') < html.index('href="/blog/knife-care-101"')
    assert "Unfinished Draft" not in html
    assert "We are a small team of reviewers." in html


def test_category_page_stats_and_description(renderer):
    html = renderer.render("/kitchen").html

    assert "<title>Kitchen Gear</title>" in html
    assert "category-logo-image.png" in html
    assert "We analyzed <strong>165 items</strong>" in html
    assert "89.7%" in html
    assert "Brands" in html
    assert "Guides</div>" in html
    assert "<strong>knives</strong>" in html
    assert 'content="Our kitchen guides cover knives, pans and everything in between."' in html
    assert 'href="/kitchen/best-chef-knives"' in html


def test_empty_category_shows_coming_soon(renderer):
    html = renderer.render("/garden").html

    assert "Guides Coming Soon" in html
    assert "the best garden tools" in html
    assert "We analyzed" not in html


def test_commerce_content_page(renderer):
    html = renderer.render("/kitchen/best-chef-knives").html

    assert "The 12 best chef knives we found after testing 120." in html
    assert "We earn a commission if you buy through our links." in html
    assert "Quick Comparison" in html
    assert "$79.99" in html
    assert "blade_length" in html
    assert "Steel Type" in html


def test_place_content_page_hides_disclosure(renderer):
    html = renderer.render("/travel/best-cafes").html

    assert "This should not be shown on place pages." not in html
    assert "All Locations" in html
    assert "Complete List" in html


def test_person_content_page(renderer):
    html = renderer.render("/people/top-chefs").html

    assert "Stats &amp; Info" in html
    assert "followers_count" in html
    assert "Our Selection Process" not in html


def test_blog_index_lists_published_articles(renderer):
    html = renderer.render("/blog").html

    assert "<title>Guides &amp; Articles</title>" in html
    assert "A Coffee Tour of Lisbon" in html
    assert "Unfinished Draft" not in html
    assert 'href="/blog/tag/travel"' in html
    assert 'href="/blog/tag/secret"' not in html


def test_tag_page(renderer):
    html = renderer.render("/blog/tag/knives").html

    assert "<title>Knives Guides &amp; Articles</title>" in html
    assert "knives Guides" in html
    assert "2 articles tagged" in html
    assert "A Coffee Tour of Lisbon" not in html
    assert "tag-link tag-link--active" in html


def test_article_page(renderer):
    html = renderer.render("/blog/knife-care-101").html

    assert "<title>Knife Care 101</title>" in html
    assert "Published February 10, 2026" in html
    assert "Updated March 1, 2026" in html
    assert "<h1>Knife Care 101</h1>" in html
    assert "<strong>never</strong>" in html
    assert "<ul>\n<li>Wash by hand</li>" in html
    assert "**never**" not in html
    assert "Our Top Picks" in html
    assert 'href="/kitchen/best-chef-knives"' in html
    assert "does-not-exist" not in html
    assert "More Guides" in html
    assert 'href="/blog/coffee-tour"' in html
    assert "article-image.png" in html


def _write_site(root: Path, site_config: dict) -> None:
    site_dir = root / SITE_ID
    site_dir.mkdir(parents=True)
    (site_dir / "site-config.json").write_text(json.dumps(site_config), encoding="utf-8")


def test_blog_index_without_articles(tmp_path, data_dir):
    _write_site(tmp_path, {"site_id": SITE_ID, "site_title": "Empty", "categories": [], "articles": []})
    renderer = SiteRenderer(ContentStore(BASE_URL, SITE_ID, FakeHTTPClient(root=tmp_path)), HTMLGenerator())

    result = renderer.render("/blog")

    assert result.status == 200
    assert "No articles published yet." in result.html


def test_home_without_site_content_is_not_found(tmp_path, data_dir):
    _write_site(tmp_path, {"site_id": SITE_ID, "categories": [], "articles": []})
    renderer = SiteRenderer(ContentStore(BASE_URL, SITE_ID, FakeHTTPClient(root=tmp_path)), HTMLGenerator())

    assert renderer.render("/").status == 404


ODD_TAGS_SITE = {
    "site_id": SITE_ID,
    "site_title": "Odd Tags",
    "categories": [],
    "articles": [
        {
            "article_slug": "sharpening",
            "article_title": "Sharpening Basics",
            "published_date": "2026-01-05",
            "status": "published",
            "tags": ["How-To/Basics", "C#", "..", ["nested"], 7],
        },
    ],
}


def _odd_tags_renderer(root: Path) -> SiteRenderer:
    _write_site(root, ODD_TAGS_SITE)
    article_dir = root / SITE_ID / "articles" / "sharpening"
    article_dir.mkdir(parents=True)
    (article_dir / "article-content.md").write_text("Use a <b>whetstone</b>.\n", encoding="utf-8")
    return SiteRenderer(ContentStore(BASE_URL, SITE_ID, FakeHTTPClient(root=root)), HTMLGenerator())


def test_tags_with_url_characters_get_routable_slugs(tmp_path, data_dir):
    renderer = _odd_tags_renderer(tmp_path / "content")

    tag_routes = [r for r in renderer.static_routes() if r.startswith("/blog/tag/")]

    assert tag_routes == ["/blog/tag/c", "/blog/tag/how-to-basics"]
    for route in tag_routes:
        assert renderer.render(route).status == 200
    assert "How-To/Basics Guides" in renderer.render("/blog/tag/how-to-basics").html
    assert renderer.render("/blog/tag/..").status == 404


def test_article_tag_links_use_slugs_and_raw_html_is_escaped(tmp_path, data_dir):
    html = _odd_tags_renderer(tmp_path / "content").render("/blog/sharpening").html

    assert 'href="/blog/tag/how-to-basics">How-To/Basics</a>' in html
    assert 'href="/blog/tag/c">C#</a>' in html
    assert 'href="/blog/tag/.."' not in html
    assert "&lt;b&gt;whetstone&lt;/b&gt;" in html
