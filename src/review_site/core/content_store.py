"""Client for the remote content store.

The store is a plain HTTP blob store laid out by convention under
``{base_url}/{site_id}/``. Every JSON document there uses snake_case keys and
is normalized to camelCase on the way in.

Critical documents (site config, site content, page content, article bodies)
raise :class:`ContentNotFoundError` when missing. Optional documents degrade:
the theme falls back to :data:`DEFAULT_THEME_CONFIG`, a category description
falls back to an empty string.
"""

from __future__ import annotations

import copy
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import requests

from .http_client import RetryableHTTPClient
from .schema import FREEFORM_FIELDS
from .text_utils import camelize_keys

logger = logging.getLogger(__name__)


class ContentNotFoundError(LookupError):
    """Raised when a required document is missing from the content store."""

    def __init__(self, what: str, url: str, reason: str = "not found"):
        super().__init__(f"{what} unavailable at {url}: {reason}")
        self.what = what
        self.url = url
        self.reason = reason


DEFAULT_THEME_CONFIG: Dict[str, Any] = {
    "schemaVersion": "1.0",
    "colors": {
        "primary": "#2563eb",
        "secondary": "#8b5cf6",
        "accent": "#f59e0b",
        "text": {"primary": "#1f2937", "secondary": "#6b7280"},
        "background": {"primary": "#ffffff", "secondary": "#f9fafb"},
    },
    "typography": {
        "fontFamily": "Inter",
        "headingFont": "Inter",
        "bodyFont": "Inter",
    },
    "layout": {
        "maxWidth": "1280px",
        "containerPadding": "2rem",
        "headerHeight": "80px",
    },
    "components": {
        "hero": {
            "badge": {"enabled": True, "style": "blue", "position": "top"},
            "layout": "centered",
            "backgroundStyle": "gradient",
        },
        "trustBadges": {"enabled": True, "mode": "auto", "style": "minimal"},
        "categoriesSection": {
            "enabled": True,
            "title": "Browse by Category",
            "layout": "grid",
            "columns": 3,
            "gap": "2rem",
        },
        "footer": {"layout": "columns", "backgroundColor": "#111827"},
    },
    "animations": {"enabled": True, "duration": "300ms"},
}


def default_theme_config() -> Dict[str, Any]:
    """Return a fresh copy of the fallback theme stamped with the current time."""
    theme = copy.deepcopy(DEFAULT_THEME_CONFIG)
    theme["lastUpdated"] = datetime.now(timezone.utc).isoformat()
    return theme


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge *override* into a copy of *base*; nested mappings merge key by key."""
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        elif value is not None:
            merged[key] = copy.deepcopy(value)
    return merged


def normalize(payload: Any) -> Any:
    """Camelize a remote payload, keeping free-form label maps verbatim."""
    return camelize_keys(payload, preserve=FREEFORM_FIELDS)


class ContentStore:
    """Fetches and normalizes site documents for one site.

    Site-wide documents are memoized for the lifetime of the instance, which
    corresponds to one build or one render request.

    Args:
        base_url: Root URL of the content store
        site_id: Site folder inside the store
        http_client: Object exposing ``get_with_retry(url)``; a
            :class:`RetryableHTTPClient` is created when omitted
    """

    def __init__(self, base_url: str, site_id: str, http_client: Optional[Any] = None):
        self.base_url = base_url.rstrip('/')
        self.site_id = site_id.strip('/')
        self.http = http_client or RetryableHTTPClient()
        self._cache: Dict[str, Any] = {}

    # ------------------------------------------------------------------ URLs

    def url(self, *parts: str) -> str:
        """Absolute URL of a document relative to the site folder."""
        suffix = '/'.join(str(p).strip('/') for p in parts if p)
        return f"{self.base_url}/{self.site_id}/{suffix}"

    def site_header_logo_url(self) -> str:
        return self.url('site-header-logo-image.png')

    def category_logo_url(self, category_id: str) -> str:
        return self.url('categories', category_id, 'category-logo-image.png')

    def page_logo_url(self, category_id: str, page_id: str) -> str:
        return self.url('categories', category_id, 'pages', page_id, 'page-logo-image.png')

    def article_image_url(self, slug: str) -> str:
        return self.url('articles', slug, 'article-image.png')

    def asset_url(self, path: str) -> str:
        """URL for an arbitrary asset path; absolute URLs pass through."""
        if path.startswith(('http://', 'https://', '//')):
            return path
        return self.url(path)

    # --------------------------------------------------------------- fetching

    def _get(self, what: str, url: str) -> requests.Response:
        try:
            response = self.http.get_with_retry(url)
        except requests.RequestException as exc:
            raise ContentNotFoundError(what, url, str(exc)) from exc
        if response is None:
            raise ContentNotFoundError(what, url)
        return response

    def _get_json(self, what: str, *parts: str) -> Any:
        url = self.url(*parts)
        response = self._get(what, url)
        try:
            payload = response.json()
        except ValueError as exc:
            raise ContentNotFoundError(what, url, f"invalid JSON ({exc})") from exc
        logger.debug("Fetched %s from %s", what, url)
        return normalize(payload)

    def _memoized(self, key: str, loader):
        if key not in self._cache:
            self._cache[key] = loader()
        return self._cache[key]

    def fetch_site_config(self) -> Dict[str, Any]:
        """Site config: categories, page summaries, articles, stats."""
        return self._memoized('site-config', lambda: self._get_json('site config', 'site-config.json'))

    def fetch_site_content(self) -> Dict[str, Any]:
        """Site copy: branding, hero, trust indicators, about, footer."""
        return self._memoized('site-content', lambda: self._get_json('site content', 'site-content.json'))

    def fetch_theme_config(self) -> Dict[str, Any]:
        """Theme config merged over the defaults; never raises."""
        return self._memoized('theme-config', self._load_theme_config)

    def _load_theme_config(self) -> Dict[str, Any]:
        try:
            theme = self._get_json('theme config', 'theme-config.json')
        except ContentNotFoundError as exc:
            logger.warning("Theme config not found, using defaults (%s)", exc.reason)
            return default_theme_config()
        if not isinstance(theme, dict):
            logger.warning("Theme config is not an object, using defaults")
            return default_theme_config()
        return deep_merge(default_theme_config(), theme)

    def fetch_category_description(self, category_id: str) -> str:
        """Category description HTML, or ``''`` when unavailable."""
        url = self.url('categories', category_id, 'category-description.html')
        try:
            response = self._get('category description', url)
        except ContentNotFoundError as exc:
            logger.warning("No category description for '%s' (%s)", category_id, exc.reason)
            return ''
        return response.text or ''

    def fetch_page_content(self, category_id: str, page_id: str) -> Dict[str, Any]:
        """Full page content for one page of a category."""
        content = self._get_json(
            'page content', 'categories', category_id, 'pages', page_id, 'page-content.json'
        )
        if not isinstance(content, dict):
            raise ContentNotFoundError('page content', self.url('categories', category_id, 'pages', page_id), 'not an object')
        return content

    def fetch_article_content(self, slug: str) -> str:
        """Raw markdown body of an article."""
        response = self._get('article content', self.url('articles', slug, 'article-content.md'))
        return response.text or ''

    def close(self) -> None:
        close = getattr(self.http, 'close', None)
        if close:
            close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
