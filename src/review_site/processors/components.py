"""
Shared HTML fragments used by item cards, page layouts and site pages.

Every function takes normalized (camelCase) dicts and returns an HTML string;
an absent or empty input returns ``''`` so callers can concatenate freely.
Fields that the content store documents as HTML (``descriptionHtml``,
``contentHtml``, category descriptions) are inserted as-is, everything else is
escaped. Article bodies are markdown and go through :func:`render_markdown`.
"""

import html
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from markdown_it import MarkdownIt

from ..core.catalog import article_tags, tag_slug
from ..core.schema import get_pricing
from ..core.stats import format_page_stats, format_percentage
from ..core.text_utils import format_count, format_date


def esc(value: Any) -> str:
    """Escape a value for HTML text or attribute context."""
    if value is None:
        return ''
    return html.escape(str(value), quote=True)


def join_lines(lines: Iterable[str]) -> str:
    """Join fragment lines, dropping blank ones."""
    return '\n'.join(line for line in lines if line and line.strip() != '')


# CommonMark with the GFM table and strikethrough rules; raw HTML in the
# source is escaped.
_MARKDOWN = MarkdownIt("commonmark", {"html": False}).enable(["table", "strikethrough"])


def render_markdown(text: Optional[str]) -> str:
    """Render an article's markdown source to HTML ('' for empty input)."""
    if not text:
        return ''
    return _MARKDOWN.render(text)


def external_link(url: str, text: str, css_class: str = '', rel: str = 'nofollow noopener') -> str:
    class_attr = f' class="{css_class}"' if css_class else ''
    return f'<a{class_attr} href="{esc(url)}" target="_blank" rel="{rel}">{text}</a>'


def breadcrumbs(trail: Sequence[Tuple[str, Optional[str]]]) -> str:
    """Render a breadcrumb trail; the last entry (or any without href) is plain text."""
    parts = []
    for label, href in trail:
        if href:
            parts.append(f'<a href="{esc(href)}">{esc(label)}</a>')
        else:
            parts.append(f'<span class="crumb-current">{esc(label)}</span>')
    return f'<nav class="breadcrumbs">{" &gt; ".join(parts)}</nav>'


def stat_tile(value: Any, label: str, note: str = '', tone: str = 'primary') -> str:
    return join_lines([
        f'<div class="stat-tile stat-tile--{tone}">',
        f'  <div class="stat-value">{esc(value)}</div>',
        f'  <div class="stat-label">{esc(label)}</div>',
        f'  <div class="stat-note">{esc(note)}</div>' if note else '',
        '</div>',
    ])


def research_badge(analyzed: Any, featured: Any, selectivity: Any) -> str:
    """Compact "N analyzed -> M picks (x%)" pill."""
    return (
        '<span class="research-badge">'
        f'<strong>{esc(analyzed)} analyzed</strong> &rarr; {esc(featured)} picks '
        f'<span class="research-badge__rate">{format_percentage(selectivity)}%</span>'
        '</span>'
    )


# ---------------------------------------------------------------- item parts

def media_block(media: Optional[Dict[str, Any]], name: str) -> str:
    images = (media or {}).get('images') or []
    if not images:
        return ''
    image = images[0]
    alt = image.get('alt') or name
    return join_lines([
        '<figure class="item-media">',
        f'  <img src="{esc(image.get("url"))}" alt="{esc(alt)}" loading="lazy">',
        f'  <figcaption>{esc(image["caption"])}</figcaption>' if image.get('caption') else '',
        '</figure>',
    ])


def rating_badge(rating: Optional[Dict[str, Any]]) -> str:
    if not rating:
        return ''
    return join_lines([
        '<div class="rating-badge">',
        f'  <span class="rating-star">&#9733;</span> <span class="rating-value">{esc(rating.get("value"))}</span>'
        f' <span class="rating-scale">/ {esc(rating.get("scale"))}</span>',
        f'  <span class="rating-count">({format_count(rating["count"])} reviews)</span>' if rating.get('count') else '',
        f'  <span class="rating-source">{esc(rating["source"])}</span>' if rating.get('source') else '',
        '</div>',
    ])


def highlights(values: Optional[List[str]], label: str = 'Key Highlights') -> str:
    if not values:
        return ''
    items = '\n'.join(f'    <li>{esc(v)}</li>' for v in values)
    return join_lines([
        '<div class="item-highlights">',
        f'  <h4>{esc(label)}</h4>',
        '  <ul>',
        items,
        '  </ul>',
        '</div>',
    ])


def attributes(values: Optional[Dict[str, Any]], label: Optional[str] = 'Details', css_class: str = 'item-attributes') -> str:
    """Key/value facts; a falsy *label* suppresses the block entirely."""
    if not values or not label:
        return ''
    rows = '\n'.join(
        f'    <div class="attribute"><span class="attribute-key">{esc(k)}</span>'
        f' <span class="attribute-value">{esc(v)}</span></div>'
        for k, v in values.items()
    )
    return join_lines([
        f'<div class="{css_class}">',
        f'  <h4>{esc(label)}</h4>',
        '  <div class="attribute-grid">',
        rows,
        '  </div>',
        '</div>',
    ])


def cta_buttons(cta: Optional[List[Dict[str, Any]]]) -> str:
    """First CTA as the primary button, the rest under "Also available at"."""
    if not cta:
        return ''
    primary, secondary = cta[0], cta[1:]
    lines = [
        '<div class="cta-buttons">',
        '  ' + external_link(primary.get('url', '#'), f'{esc(primary.get("text"))} &rarr;', 'cta cta--primary'),
    ]
    if secondary:
        lines.append('  <p class="cta-also">Also available at:</p>')
        lines.append('  <div class="cta-secondary">')
        for option in secondary:
            text = f'View on {option["merchant"]}' if option.get('merchant') else option.get('text')
            lines.append('    ' + external_link(option.get('url', '#'), esc(text), 'cta cta--secondary'))
        lines.append('  </div>')
    lines.append('</div>')
    return join_lines(lines)


# ------------------------------------------------------------- page sections

def comparison_table(items: List[Dict[str, Any]]) -> str:
    """Quick comparison of every item: rank, name, best-for, price, rating, CTAs."""
    rows = []
    for item in items or []:
        pricing = get_pricing(item) or {}
        rating = item.get('rating')
        rating_cell = ''
        if rating:
            if rating.get('scale'):
                suffix = f'/ {esc(rating["scale"])}'
            elif rating.get('count'):
                suffix = f'({format_count(rating["count"])})'
            else:
                suffix = ''
            rating_cell = f'&#9733; {esc(rating.get("value"))} {suffix}'.rstrip()
        ctas = ' '.join(
            external_link(c.get('url', '#'), esc(c.get('text')), 'cta cta--primary' if i == 0 else 'cta cta--secondary')
            for i, c in enumerate(item.get('cta') or [])
        )
        badge = f' <span class="badge">{esc(item["badge"])}</span>' if item.get('badge') else ''
        rows.append(join_lines([
            '    <tr>',
            f'      <td class="rank">#{esc(item.get("rank"))}{badge}</td>',
            f'      <td class="name">{esc(item.get("name"))}</td>',
            f'      <td class="tagline">{esc(item.get("tagline"))}</td>',
            f'      <td class="price">{esc(pricing.get("display") or "-")}</td>',
            f'      <td class="rating">{rating_cell}</td>',
            f'      <td class="actions">{ctas}</td>',
            '    </tr>',
        ]))
    return join_lines([
        '<section class="comparison-table">',
        '  <h2>Quick Comparison</h2>',
        '  <table>',
        '    <thead><tr><th>Rank</th><th>Product</th><th>Best For</th><th>Price</th><th>Rating</th><th>Action</th></tr></thead>',
        '    <tbody>',
        '\n'.join(rows),
        '    </tbody>',
        '  </table>',
        '</section>',
    ])


def buyer_guide(sections: Optional[List[Dict[str, Any]]]) -> str:
    if not sections:
        return ''
    body = []
    for section in sections:
        body.append(join_lines([
            '  <div class="guide-section">',
            f'    <h3>{esc(section.get("title"))}</h3>',
            f'    <div class="prose">{section.get("contentHtml") or ""}</div>',
            '  </div>',
        ]))
    return join_lines(['<section class="buyer-guide">', "  <h2>Buyer's Guide</h2>", *body, '</section>'])


def faq(items: Optional[List[Dict[str, Any]]]) -> str:
    if not items:
        return ''
    entries = [
        join_lines([
            '  <details class="faq-item">',
            f'    <summary>{esc(entry.get("question"))}</summary>',
            f'    <p>{esc(entry.get("answer"))}</p>',
            '  </details>',
        ])
        for entry in items
    ]
    return join_lines(['<section class="faq">', '  <h2>Frequently Asked Questions</h2>', *entries, '</section>'])


def final_recommendation(recommendation: Optional[Dict[str, Any]]) -> str:
    if not recommendation:
        return ''
    cta = recommendation.get('cta') or {}
    return join_lines([
        '<section class="final-recommendation">',
        '  <h2>Our Final Verdict</h2>',
        f'  <p>{esc(recommendation.get("text"))}</p>',
        '  ' + external_link(cta.get('url', '#'), esc(cta.get('label')), 'cta cta--primary') if cta.get('url') else '',
        '</section>',
    ])


def _has_coordinates(place: Dict[str, Any]) -> bool:
    return bool(place.get('lat')) and bool(place.get('lng'))


def map_center(places: List[Dict[str, Any]]) -> Optional[Tuple[float, float]]:
    """Mean latitude/longitude of the places that carry coordinates."""
    located = [p for p in places or [] if _has_coordinates(p)]
    if not located:
        return None
    lat = sum(float(p['lat']) for p in located) / len(located)
    lng = sum(float(p['lng']) for p in located) / len(located)
    return lat, lng


def maps_search_url(lat: Any, lng: Any) -> str:
    return f'https://www.google.com/maps/search/?api=1&query={lat},{lng}'


def location_map(section: Optional[Dict[str, Any]]) -> str:
    """Static stand-in for the interactive map: centre plus a list of places."""
    places = (section or {}).get('places') or []
    if not places:
        return ''
    center = map_center(places)
    if center is None:
        return join_lines([
            '<section class="location-map location-map--empty">',
            '  <p>No location data available</p>',
            '</section>',
        ])
    lat, lng = center
    osm = f'https://www.openstreetmap.org/?mlat={lat:.5f}&amp;mlon={lng:.5f}#map=13/{lat:.5f}/{lng:.5f}'
    rows = []
    for place in places:
        if not _has_coordinates(place):
            continue
        address = f' <span class="place-address">{esc(place["address"])}</span>' if place.get('address') else ''
        rows.append(
            f'    <li><a href="{esc(maps_search_url(place["lat"], place["lng"]))}" target="_blank" rel="noopener noreferrer">'
            f'{esc(place.get("name"))}</a>{address}</li>'
        )
    return join_lines([
        f'<section class="location-map" data-center="{lat:.5f},{lng:.5f}" data-label="{esc(section.get("center"))}">',
        '  <h2>All Locations</h2>',
        f'  <p><a href="{osm}" target="_blank" rel="noopener noreferrer">Open map of {esc(section.get("center") or "all places")}</a></p>',
        '  <ul class="place-list">',
        '\n'.join(rows),
        '  </ul>',
        '</section>',
    ])


def related_pages(pages: Optional[List[Dict[str, Any]]]) -> str:
    if not pages:
        return ''
    links = '\n'.join(
        f'    <li><a href="{esc(p.get("url"))}">{esc(p.get("title"))}</a>'
        f' <span class="related-category">{esc(p.get("category"))}</span></li>'
        for p in pages
    )
    return join_lines(['<section class="related-content">', '  <h2>Related Articles</h2>', '  <ul>', links, '  </ul>', '</section>'])


# ------------------------------------------------------------------- cards

def page_card(page: Dict[str, Any], category_id: str) -> str:
    """Summary card for a page on its category listing."""
    stats = format_page_stats(page)
    href = f'/{category_id}/{page.get("pageId")}'
    lines = [
        f'<a class="page-card" href="{esc(href)}">',
        f'  <h3>{esc(page.get("pageTitle"))}</h3>',
    ]
    if stats['hasStats']:
        lines.append('  <div class="page-card__stats">')
        lines.append(f'    <span>{esc(stats["itemsAnalyzed"])} analyzed</span> <strong>{esc(stats["itemsFeatured"])} picks</strong>')
        if stats['diversityDisplay']:
            lines.append(f'    <div class="page-card__diversity">{esc(stats["diversityDisplay"])}</div>')
        if stats['selectivity']:
            lines.append(f'    <div class="page-card__selectivity">Top {format_percentage(stats["selectivity"])}% selected</div>')
        if page.get('lastUpdated'):
            lines.append(f'    <div class="page-card__updated">Last updated: {esc(format_date(page["lastUpdated"]))}</div>')
        lines.append('  </div>')
    else:
        lines.append('  <p>Expert reviews and recommendations</p>')
    lines.append('  <span class="page-card__cta">View picks &rarr;</span>')
    lines.append('</a>')
    return join_lines(lines)


def category_card(category: Dict[str, Any], logo_url: str, layout: str = 'grid') -> str:
    pages = category.get('pages') or []
    noun = 'page' if len(pages) == 1 else 'pages'
    title = esc(category.get('categoryTitle'))
    return join_lines([
        f'<a class="category-card category-card--{esc(layout)}" href="/{esc(category.get("categoryId"))}">',
        f'  <img src="{esc(logo_url)}" alt="{title}" width="600" height="338" loading="lazy">',
        f'  <h3>{title}</h3>',
        f'  <p>{len(pages)} {noun} available</p>',
        '</a>',
    ])


def article_card(article: Dict[str, Any], image_url: Optional[str] = None, active_tag: Optional[str] = None) -> str:
    """Card linking to an article; shows at most two tags.

    *active_tag* is a tag slug; tags slugifying to it are highlighted.
    """
    tags = article_tags(article)[:2]
    tag_html = ' '.join(
        f'<span class="tag{" tag--active" if active_tag and tag_slug(tag) == active_tag else ""}">{esc(tag)}</span>'
        for tag in tags
    )
    title = esc(article.get('articleTitle'))
    return join_lines([
        f'<a class="article-card" href="/blog/{esc(article.get("articleSlug"))}">',
        f'  <img src="{esc(image_url)}" alt="{title}" width="600" height="338" loading="lazy">' if image_url and article.get('imagePrompt') else '',
        f'  <div class="article-card__tags">{tag_html}</div>' if tag_html else '',
        f'  <h2>{title}</h2>',
        f'  <p>{esc(article.get("excerpt"))}</p>',
        f'  <span class="article-card__date">{esc(format_date(article.get("publishedDate")))}</span>',
        '  <span class="article-card__cta">Read more &rarr;</span>',
        '</a>',
    ])


def tag_filter(tags: List[str], active: Optional[str] = None) -> str:
    """Row of tag links; "All" is active when no tag slug is selected."""
    if not tags:
        return ''
    links = [f'<a class="tag-link{"" if active else " tag-link--active"}" href="/blog">All</a>']
    for tag in tags:
        state = ' tag-link--active' if active and tag_slug(tag) == active else ''
        links.append(f'<a class="tag-link{state}" href="/blog/tag/{esc(tag_slug(tag))}">{esc(tag)}</a>')
    return f'<nav class="tag-filter">{" ".join(links)}</nav>'
