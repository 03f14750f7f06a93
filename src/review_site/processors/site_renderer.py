"""
Route resolution and page rendering for the whole site.

``SiteRenderer.render(path)`` maps a site path to a view, fetches what the
view needs from the content store and wraps the body in the site chrome
(header, footer, theme). Missing content of any kind yields the not-found
page with status 404.

Routes::

    /                    home
    /blog                article index
    /blog/tag/{slug}     articles with a tag (see ``catalog.tag_slug``)
    /blog/{slug}         article
    /{category}          category listing
    /{category}/{page}   content page
"""

import logging
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from ..core import catalog
from ..core.content_store import ContentNotFoundError, ContentStore
from ..core.stats import calculate_category_stats, calculate_site_stats, format_percentage
from ..core.text_utils import capitalize_first, format_count, format_date, strip_tags
from .components import (
    article_card,
    breadcrumbs,
    category_card,
    esc,
    join_lines,
    page_card,
    render_markdown,
    research_badge,
    stat_tile,
    tag_filter,
)
from .html_generator import NOT_FOUND_ROUTE, HTMLGenerator
from .page_layouts import render_content_page

logger = logging.getLogger(__name__)

DEFAULT_BLOG_TITLE = "Guides & Articles"
AFFILIATE_NOTICE = (
    "We may earn commissions from qualifying purchases at no extra cost to you. "
    "This helps us keep our content free and independent."
)


class RenderResult(NamedTuple):
    status: int
    html: str
    path: str


class PageNotFound(LookupError):
    """Raised by a view when the route does not resolve to any content."""


def normalize_path(path: str) -> str:
    """Drop query string, fragment and trailing slash; always start with ``/``."""
    path = (path or '/').split('#', 1)[0].split('?', 1)[0]
    segments = [s for s in path.split('/') if s]
    return '/' + '/'.join(segments)


class SiteRenderer:
    """Renders site routes to complete HTML documents.

    Args:
        store: Content store for the site being rendered
        generator: Document generator; a default :class:`HTMLGenerator` is
            created when omitted
    """

    def __init__(self, store: ContentStore, generator: Optional[HTMLGenerator] = None):
        self.store = store
        self.generator = generator or HTMLGenerator()

    # ------------------------------------------------------------ dispatch

    def render(self, path: str) -> RenderResult:
        """Render *path*; unresolvable routes and missing content give a 404."""
        path = normalize_path(path)
        try:
            body, meta = self._dispatch(path)
        except (PageNotFound, ContentNotFoundError) as exc:
            logger.info("No page for %s: %s", path, exc)
            return self.render_not_found(path)
        return RenderResult(200, self._document(body, meta), path)

    def render_not_found(self, path: str = NOT_FOUND_ROUTE) -> RenderResult:
        body = join_lines([
            '<div class="not-found">',
            '  <h1>Page Not Found</h1>',
            "  <p>The page you're looking for doesn't exist or has moved.</p>",
            '  <a class="cta cta--primary" href="/">Back to home</a>',
            '</div>',
        ])
        meta = {'title': 'Page Not Found', 'description': '', 'keywords': ''}
        return RenderResult(404, self._document(body, meta), path)

    def _dispatch(self, path: str) -> Tuple[str, Dict[str, str]]:
        segments = [s for s in path.split('/') if s]
        if not segments:
            return self.home()
        if segments[0] == 'blog':
            if len(segments) == 1:
                return self.blog_index()
            if len(segments) == 3 and segments[1] == 'tag':
                return self.tag_page(segments[2])
            if len(segments) == 2:
                return self.article_page(segments[1])
            raise PageNotFound(path)
        if len(segments) == 1:
            return self.category_page(segments[0])
        if len(segments) == 2:
            return self.content_page(segments[0], segments[1])
        raise PageNotFound(path)

    def static_routes(self, category_id: Optional[str] = None) -> List[str]:
        """Every route of the site, or only one category's routes."""
        site_config = self.store.fetch_site_config()
        routes: List[str] = []
        if category_id is None:
            routes.extend(['/', '/blog'])
        for category in catalog.categories(site_config):
            cat_id = category.get('categoryId')
            if category_id is not None and cat_id != category_id:
                continue
            routes.append(f'/{cat_id}')
            routes.extend(f'/{cat_id}/{page.get("pageId")}' for page in category.get('pages') or [])
        if category_id is None:
            articles = catalog.published_articles(site_config)
            routes.extend(f'/blog/{a.get("articleSlug")}' for a in articles)
            routes.extend(f'/blog/tag/{slug}' for slug in catalog.tag_slugs(articles))
        return routes

    # ------------------------------------------------------------- chrome

    def _site_content(self) -> Dict[str, Any]:
        """Site copy for the chrome; the chrome still renders when it is missing."""
        try:
            return self.store.fetch_site_content()
        except ContentNotFoundError as exc:
            logger.warning("Rendering site chrome without site content: %s", exc)
            return {}

    def _default_meta(self, site_content: Dict[str, Any]) -> Dict[str, str]:
        return {
            'title': (site_content.get('branding') or {}).get('siteName', ''),
            'description': site_content.get('metaDescription', ''),
            'keywords': ', '.join(site_content.get('seoKeywords') or []),
        }

    def _document(self, body: str, meta: Dict[str, str]) -> str:
        site_content = self._site_content()
        theme = self.store.fetch_theme_config()
        merged = self._default_meta(site_content)
        merged.update({k: v for k, v in meta.items() if v})
        return self.generator.render_document(
            title=merged['title'],
            description=merged['description'],
            keywords=merged['keywords'],
            theme=theme,
            header=self.render_header(site_content, theme),
            content=body,
            footer=self.render_footer(site_content),
        )

    def render_header(self, site_content: Dict[str, Any], theme: Dict[str, Any]) -> str:
        """Brand link, optional logo and the first two trust indicators."""
        site_name = (site_content.get('branding') or {}).get('siteName', '')
        logo = theme.get('logo') or {}
        logo_html = ''
        # Only an explicitly configured logo is shown.
        if logo.get('url'):
            logo_html = (
                f'<img src="{esc(self.store.asset_url(logo["url"]))}" alt="{esc(site_name)}"'
                f' width="{esc(logo.get("width", 40))}" height="{esc(logo.get("height", 40))}">'
            )
        indicators = ' '.join(
            f'<span>&#10003; {esc(text)}</span>' for text in (site_content.get('trustIndicators') or [])[:2]
        )
        return join_lines([
            '<header class="site-header">',
            '  <div class="site-header__inner">',
            f'    <a href="/">{logo_html}<span>{esc(site_name)}</span></a>',
            f'    <div class="site-header__trust">{indicators}</div>' if indicators else '',
            '  </div>',
            '</header>',
        ])

    def render_footer(self, site_content: Dict[str, Any]) -> str:
        footer = site_content.get('footer') or {}
        site_name = (site_content.get('branding') or {}).get('siteName', '')
        promises = '\n'.join(f'      <li>&#10003; {esc(t)}</li>' for t in site_content.get('trustIndicators') or [])
        links = '\n'.join(
            f'      <li><a href="{esc(link.get("url"))}">{esc(link.get("text"))}</a></li>'
            for link in footer.get('links') or []
        )
        return join_lines([
            '<footer class="site-footer">',
            '  <div class="site-footer__inner">',
            '    <div>',
            f'      <h3>{esc(site_name)}</h3>',
            f'      <p>{esc(footer.get("aboutText"))}</p>',
            '    </div>',
            '    <div>',
            '      <h4>Our Promise</h4>',
            '      <ul>',
            promises,
            '      </ul>',
            '    </div>',
            '    <div>',
            '      <h4>Links</h4>',
            '      <ul>',
            links,
            '      </ul>',
            f'      <p class="affiliate-notice">{AFFILIATE_NOTICE}</p>',
            '    </div>',
            '  </div>',
            f'  <div class="site-footer__copyright"><p>{esc(footer.get("copyright"))}</p></div>',
            '</footer>',
        ])

    # --------------------------------------------------------------- views

    def home(self) -> Tuple[str, Dict[str, str]]:
        site_config = self.store.fetch_site_config()
        site_content = self.store.fetch_site_content()
        theme = self.store.fetch_theme_config()
        components = theme.get('components') or {}
        stats = calculate_site_stats(site_config)

        sections = [
            self._hero(site_content.get('hero') or {}, components.get('hero') or {}),
            self._trust_badges(components.get('trustBadges') or {}, stats, site_content.get('trustIndicators') or []),
        ]

        categories_theme = components.get('categoriesSection') or {}
        if categories_theme.get('enabled', True):
            layout = categories_theme.get('layout') or 'grid'
            title = (site_content.get('categoriesSection') or {}).get('title') or categories_theme.get('title', '')
            cards = '\n'.join(
                category_card(c, self.store.category_logo_url(c.get('categoryId')), layout)
                for c in catalog.categories(site_config)
            )
            sections.append(join_lines([
                '<section class="categories">',
                f'  <h2>{esc(title)}</h2>',
                f'  <div class="category-grid category-grid--{esc(layout)}">',
                cards,
                '  </div>',
                '</section>',
            ]))

        featured = catalog.featured_articles(site_config)
        if featured:
            cards = '\n'.join(article_card(a, self.store.article_image_url(a.get('articleSlug'))) for a in featured)
            sections.append(join_lines([
                '<section class="featured-articles">',
                '  <h2>Getting Started</h2>',
                '  <a class="view-all" href="/blog">View all guides &rarr;</a>',
                '  <div class="article-grid">',
                cards,
                '  </div>',
                '</section>',
            ]))

        about = site_content.get('about') or {}
        if about.get('content'):
            sections.append(join_lines([
                '<section class="about">',
                f'  <h2>{esc(about.get("title"))}</h2>',
                f'  <div class="prose">{about["content"]}</div>',
                '</section>',
            ]))

        return join_lines(['<div class="home">', *sections, '</div>']), {}

    def _hero(self, hero: Dict[str, Any], hero_theme: Dict[str, Any]) -> str:
        layout = hero_theme.get('layout') or 'centered'
        background = hero_theme.get('backgroundStyle') or 'gradient'
        badge_theme = hero_theme.get('badge') or {}
        badge_text = (hero.get('badge') or {}).get('text')
        cta = hero.get('cta') or {}
        return join_lines([
            f'<section class="hero hero--{esc(layout)} hero--bg-{esc(background)}">',
            f'  <div class="hero__badge">{esc(badge_text)}</div>' if badge_theme.get('enabled') and badge_text else '',
            f'  <h1>{hero.get("headline") or ""}</h1>',
            f'  <p class="hero__subheadline">{esc(hero.get("subheadline"))}</p>' if hero.get('subheadline') else '',
            f'  <a class="cta cta--primary" href="{esc(cta.get("url"))}">{esc(cta.get("text"))}</a>' if cta.get('url') else '',
            '</section>',
        ])

    def _trust_badges(self, badges_theme: Dict[str, Any], stats: Dict[str, Any], indicators: List[str]) -> str:
        """Auto mode shows site totals, custom mode the configured badges, otherwise the trust indicators."""
        if not badges_theme.get('enabled', True):
            return ''
        mode = badges_theme.get('mode')
        if mode == 'auto' and stats['totalItemsAnalyzed'] > 0:
            tiles = [
                stat_tile(f"{format_count(stats['totalItemsAnalyzed'])}+", 'Items Analyzed'),
                stat_tile(stats['totalItemsFeatured'], 'Expert Picks'),
                stat_tile(f"Top {format_percentage(stats['selectivity'])}%", 'Selected'),
            ]
        elif mode == 'custom' and badges_theme.get('customBadges'):
            tiles = [stat_tile(b.get('value'), b.get('label', '')) for b in badges_theme['customBadges']]
        else:
            tiles = [f'<div class="trust-indicator">&#10003; {esc(text)}</div>' for text in indicators]
        style = badges_theme.get('style') or 'minimal'
        return join_lines([f'<section class="trust-badges trust-badges--{esc(style)}">', *tiles, '</section>'])

    def category_page(self, category_id: str) -> Tuple[str, Dict[str, str]]:
        site_config = self.store.fetch_site_config()
        category = catalog.find_category(site_config, category_id)
        if category is None:
            raise PageNotFound(f"unknown category '{category_id}'")

        title = category.get('categoryTitle') or category_id
        description_html = self.store.fetch_category_description(category_id)
        stats = calculate_category_stats(category)

        if category.get('iconPrompt'):
            header = join_lines([
                '<div class="category-hero">',
                f'  <img src="{esc(self.store.category_logo_url(category_id))}" alt="{esc(title)}">',
                f'  <h1>{esc(title)}</h1>',
                '</div>',
            ])
        else:
            header = f'<h1>{esc(title)}</h1>'

        banner = ''
        if stats['hasStats']:
            tiles = [stat_tile(stats['totalAnalyzed'], 'Items Analyzed')]
            tiles.extend(
                stat_tile(m['count'], capitalize_first(m.get('label') or ''))
                for m in stats['diversityMetrics']
            )
            if stats['rejectionRate'] > 0:
                tiles.append(stat_tile(f"{format_percentage(stats['rejectionRate'])}%", 'Filtered Out', tone='danger'))
            tiles.append(stat_tile(stats['totalFeatured'], 'Expert Picks'))
            tiles.append(stat_tile(stats['totalPages'], 'Guide' if stats['totalPages'] == 1 else 'Guides'))
            banner = join_lines([
                '<section class="stats-banner">',
                f'  <p>We analyzed <strong>{esc(stats["totalAnalyzed"])} items</strong> to bring you'
                f' <strong>{esc(stats["totalFeatured"])} expert recommendations</strong></p>',
                '  <div class="stats-banner__grid">',
                *tiles,
                '  </div>',
                '</section>',
            ])

        pages = category.get('pages') or []
        if pages:
            listing = join_lines(['<div class="page-grid">', *(page_card(p, category_id) for p in pages), '</div>'])
        else:
            listing = join_lines([
                '<div class="empty-state">',
                '  <h3>Guides Coming Soon</h3>',
                f"  <p>We're currently researching and testing the best {esc(title.lower())}. Check back soon for our expert picks.</p>",
                '</div>',
            ])

        body = join_lines([
            '<div class="category-page">',
            breadcrumbs([('Home', '/'), (title, None)]),
            header,
            f'<div class="page-meta">{research_badge(stats["totalAnalyzed"], stats["totalFeatured"], stats["selectivity"])}</div>'
            if stats['totalAnalyzed'] > 0 else '',
            banner,
            f'<div class="prose category-description">{description_html}</div>' if description_html else '',
            '<h2>Top Picks</h2>',
            listing,
            '</div>',
        ])
        meta = {
            'title': title,
            'description': category.get('metaDescription') or strip_tags(description_html)[:160],
            'keywords': ', '.join(category.get('seoKeywords') or []),
        }
        return body, meta

    def content_page(self, category_id: str, page_id: str) -> Tuple[str, Dict[str, str]]:
        site_config = self.store.fetch_site_config()
        category = catalog.find_category(site_config, category_id)
        if category is None:
            raise PageNotFound(f"unknown category '{category_id}'")
        page_meta = catalog.find_page(category, page_id)
        if page_meta is None:
            raise PageNotFound(f"unknown page '{page_id}' in '{category_id}'")

        page_content = self.store.fetch_page_content(category_id, page_id)
        body = render_content_page(page_content, page_meta, category, category_id)
        meta = {
            'title': page_content.get('pageTitle') or page_meta.get('pageTitle', ''),
            'description': page_content.get('metaDescription') or page_content.get('introduction', ''),
            'keywords': ', '.join(page_content.get('seoKeywords') or []),
        }
        return body, meta

    def _article_cards(self, articles: List[Dict[str, Any]], active_tag: Optional[str] = None) -> str:
        return join_lines([
            '<div class="article-grid">',
            *(article_card(a, self.store.article_image_url(a.get('articleSlug')), active_tag) for a in articles),
            '</div>',
        ])

    def blog_index(self) -> Tuple[str, Dict[str, str]]:
        site_config = self.store.fetch_site_config()
        articles = catalog.published_articles(site_config)
        site_name = (self._site_content().get('branding') or {}).get('siteName') or site_config.get('siteTitle', '')

        if articles:
            listing = self._article_cards(articles)
        else:
            listing = '<div class="empty-state"><p>No articles published yet.</p></div>'

        body = join_lines([
            '<div class="blog-index">',
            f'<h1>{esc(DEFAULT_BLOG_TITLE)}</h1>',
            '<p class="lead">Everything you need to choose the right products and get started.</p>',
            tag_filter(catalog.collect_tags(articles)),
            listing,
            '</div>',
        ])
        description = f"Guides, tips and tutorials from {site_name}." if site_name else "Guides, tips and tutorials."
        return body, {'title': DEFAULT_BLOG_TITLE, 'description': description}

    def tag_page(self, slug: str) -> Tuple[str, Dict[str, str]]:
        site_config = self.store.fetch_site_config()
        articles = catalog.published_articles(site_config)
        tagged = catalog.articles_with_tag(articles, slug)
        if not tagged:
            raise PageNotFound(f"no articles tagged '{slug}'")
        tag = catalog.tag_label(articles, slug) or slug

        noun = 'article' if len(tagged) == 1 else 'articles'
        body = join_lines([
            '<div class="blog-index blog-index--tag">',
            breadcrumbs([('Home', '/'), (DEFAULT_BLOG_TITLE, '/blog'), (tag, None)]),
            f'<h1>{esc(tag)} Guides</h1>',
            f'<p class="lead">{len(tagged)} {noun} tagged with &ldquo;{esc(tag)}&rdquo;</p>',
            tag_filter(catalog.collect_tags(articles), active=slug),
            self._article_cards(tagged, active_tag=slug),
            '</div>',
        ])
        meta = {
            'title': f"{capitalize_first(tag)} {DEFAULT_BLOG_TITLE}",
            'description': f'Guides and articles tagged with "{tag}".',
        }
        return body, meta

    def article_page(self, slug: str) -> Tuple[str, Dict[str, str]]:
        site_config = self.store.fetch_site_config()
        article = catalog.find_article(site_config, slug)
        if article is None:
            raise PageNotFound(f"unknown article '{slug}'")
        markdown = self.store.fetch_article_content(slug)
        title = article.get('articleTitle') or slug

        dates = f"Published {esc(format_date(article.get('publishedDate')))}"
        if article.get('lastUpdated') and article.get('lastUpdated') != article.get('publishedDate'):
            dates += f" &middot; Updated {esc(format_date(article['lastUpdated']))}"

        tags = ' '.join(
            f'<a class="tag-link" href="/blog/tag/{esc(catalog.tag_slug(t))}">{esc(t)}</a>'
            for t in catalog.article_tags(article) if catalog.tag_slug(t)
        )

        related = catalog.resolve_related_pages(site_config, article)
        related_html = ''
        if related:
            links = '\n'.join(
                f'    <a class="related-pick" href="/{esc(c.get("categoryId"))}/{esc(p.get("pageId"))}">'
                f'<strong>{esc(p.get("pageTitle"))}</strong> <span>{esc(c.get("categoryTitle"))}</span></a>'
                for p, c in related
            )
            related_html = join_lines(['<section class="related-picks">', '  <h2>Our Top Picks</h2>', links, '</section>'])

        others = catalog.more_articles(site_config, slug)
        more_html = ''
        if others:
            links = '\n'.join(
                f'    <a class="more-article" href="/blog/{esc(a.get("articleSlug"))}">'
                f'<strong>{esc(a.get("articleTitle"))}</strong> <span>{esc(a.get("excerpt"))}</span> Read &rarr;</a>'
                for a in others
            )
            more_html = join_lines(['<section class="more-articles">', '  <h2>More Guides</h2>', links, '</section>'])

        image = ''
        if article.get('imagePrompt'):
            image = f'<img class="article-image" src="{esc(self.store.article_image_url(slug))}" alt="{esc(title)}">'

        body = join_lines([
            '<div class="article-page">',
            breadcrumbs([('Home', '/'), (DEFAULT_BLOG_TITLE, '/blog'), (title, None)]),
            '<header class="article-header">',
            f'  <div class="article-tags">{tags}</div>' if tags else '',
            f'  <h1>{esc(title)}</h1>',
            f'  <p class="article-dates">{dates}</p>',
            '</header>',
            image,
            f'<article class="article-body prose">{render_markdown(markdown)}</article>',
            related_html,
            more_html,
            f'<p class="back-link"><a href="/blog">&larr; All {esc(DEFAULT_BLOG_TITLE)}</a></p>',
            '</div>',
        ])
        meta = {
            'title': title,
            'description': article.get('metaDescription', ''),
            'keywords': ', '.join(catalog.article_tags(article)),
        }
        return body, meta
