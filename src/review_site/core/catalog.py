"""Best-effort lookups over a normalized site config.

Nothing here enforces referential integrity: an unknown id simply yields
``None`` or an empty list and the renderers show an empty state.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Tuple

from .schema import PUBLISHED
from .text_utils import date_sort_key

HOME_FEATURED_LIMIT = 3
MORE_ARTICLES_LIMIT = 3

_NON_SLUG = re.compile(r"[\W_]+")


def categories(site_config: Dict[str, Any]) -> List[Dict[str, Any]]:
    return list((site_config or {}).get('categories') or [])


def find_category(site_config: Dict[str, Any], category_id: str) -> Optional[Dict[str, Any]]:
    """Return the category whose ``categoryId`` matches, or ``None``."""
    for category in categories(site_config):
        if category.get('categoryId') == category_id:
            return category
    return None


def find_page(category: Optional[Dict[str, Any]], page_id: str) -> Optional[Dict[str, Any]]:
    """Return the page summary with ``pageId`` inside *category*, or ``None``."""
    if not category:
        return None
    for page in category.get('pages') or []:
        if page.get('pageId') == page_id:
            return page
    return None


def published_articles(site_config: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Published articles, newest ``publishedDate`` first."""
    articles = [a for a in (site_config or {}).get('articles') or [] if a.get('status') == PUBLISHED]
    articles.sort(key=lambda a: date_sort_key(a.get('publishedDate')), reverse=True)
    return articles


def featured_articles(site_config: Dict[str, Any], limit: int = HOME_FEATURED_LIMIT) -> List[Dict[str, Any]]:
    """Featured published articles ordered by ``featuredOrder``."""
    featured = [
        a for a in (site_config or {}).get('articles') or []
        if a.get('featured') and a.get('status') == PUBLISHED
    ]
    featured.sort(key=lambda a: a.get('featuredOrder') or 0)
    return featured[:limit]


def find_article(site_config: Dict[str, Any], slug: str) -> Optional[Dict[str, Any]]:
    """Return the published article with ``articleSlug == slug``."""
    for article in (site_config or {}).get('articles') or []:
        if article.get('articleSlug') == slug and article.get('status') == PUBLISHED:
            return article
    return None


def tag_slug(tag: Any) -> str:
    """URL segment for a tag: lower-cased, non-word runs collapsed to ``-``.

    ``'How-To/Basics' -> 'how-to-basics'``, ``'C#' -> 'c'``. Tags with nothing
    usable left (``'..'``, ``'#'``, non-strings) give ``''`` and get no route.
    """
    if not isinstance(tag, str):
        return ''
    return _NON_SLUG.sub('-', tag.lower()).strip('-')


def article_tags(article: Dict[str, Any]) -> List[str]:
    """String tags of *article*; anything else in ``tags`` is ignored."""
    tags = article.get('tags')
    if not isinstance(tags, list):
        return []
    return [t for t in tags if isinstance(t, str)]


def collect_tags(articles: List[Dict[str, Any]]) -> List[str]:
    """Sorted unique routable tags across *articles*."""
    tags = set()
    for article in articles:
        tags.update(t for t in article_tags(article) if tag_slug(t))
    return sorted(tags)


def tag_slugs(articles: List[Dict[str, Any]]) -> List[str]:
    """Sorted unique tag slugs; tags that slugify alike share one route."""
    return sorted({tag_slug(t) for t in collect_tags(articles)})


def tag_label(articles: List[Dict[str, Any]], slug: str) -> Optional[str]:
    """First tag (in sorted order) whose slug is *slug*."""
    for tag in collect_tags(articles):
        if tag_slug(tag) == slug:
            return tag
    return None


def articles_with_tag(articles: List[Dict[str, Any]], slug: str) -> List[Dict[str, Any]]:
    """Articles carrying any tag whose slug is *slug*."""
    if not slug:
        return []
    return [a for a in articles if any(tag_slug(t) == slug for t in article_tags(a))]


def resolve_related_pages(
    site_config: Dict[str, Any],
    article: Dict[str, Any],
) -> List[Tuple[Dict[str, Any], Dict[str, Any]]]:
    """Map an article's ``relatedPages`` ids to ``(page, category)`` pairs.

    The first category containing a page id wins; unknown ids are dropped.
    """
    resolved = []
    for page_id in article.get('relatedPages') or []:
        for category in categories(site_config):
            page = find_page(category, page_id)
            if page:
                resolved.append((page, category))
                break
    return resolved


def more_articles(site_config: Dict[str, Any], slug: str, limit: int = MORE_ARTICLES_LIMIT) -> List[Dict[str, Any]]:
    """Other published articles to suggest under an article."""
    others = [
        a for a in (site_config or {}).get('articles') or []
        if a.get('status') == PUBLISHED and a.get('articleSlug') != slug
    ]
    return others[:limit]
