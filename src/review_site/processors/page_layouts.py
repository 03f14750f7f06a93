"""
Page layouts keyed by content type.

The base page renders the structure every listing page shares. Commerce and
place layouts only contribute a header slot (between the introduction and the
items) and a footer slot (after the FAQ). ``PAGE_LAYOUT_MAP`` maps content
types to layouts; person, list and unknown types use the base page.
"""

from typing import Any, Callable, Dict, Optional

from ..core.schema import PHYSICAL_PRODUCT, PLACE, SERVICE_OFFER, is_commerce_type, page_content_type
from ..core.stats import format_one_decimal, format_page_stats
from ..core.text_utils import capitalize_first, format_date
from .components import (
    breadcrumbs,
    buyer_guide,
    comparison_table,
    esc,
    faq,
    final_recommendation,
    join_lines,
    location_map,
    related_pages,
    research_badge,
    stat_tile,
)
from .item_cards import render_item_card


def _research_section(stats: Dict[str, Any], page_meta: Dict[str, Any], is_commerce: bool) -> str:
    if not stats['hasStats']:
        return ''
    tiles = [
        stat_tile(
            stats['itemsAnalyzed'],
            'Products Analyzed' if is_commerce else 'Items Analyzed',
            'We researched every highly-rated option',
        )
    ]
    diversity = ((page_meta or {}).get('metadata') or {}).get('diversityMetric')
    if diversity:
        tiles.append(stat_tile(diversity.get('count'), capitalize_first(diversity.get('label') or ''), 'Comprehensive coverage', 'accent'))
    if stats['itemsAnalyzed'] > 0:
        tiles.append(stat_tile(f"{format_one_decimal(stats['rejectionRate'])}%", 'Filtered Out', 'Only the best made our list', 'danger'))
    tiles.append(stat_tile(stats['itemsFeatured'], 'Top Picks', 'Our expert recommendations', 'accent'))
    return join_lines([
        '<section class="research-stats">',
        f'  <h2>{"Our Research Process" if is_commerce else "Our Selection Process"}</h2>',
        '  <div class="research-stats__grid">',
        *tiles,
        '  </div>',
        '</section>',
    ])


def render_base_page(
    page_content: Dict[str, Any],
    page_meta: Dict[str, Any],
    category: Dict[str, Any],
    category_id: str,
    header_slot: str = '',
    footer_slot: str = '',
) -> str:
    """Render the shared page structure around optional header/footer slots."""
    stats = format_page_stats(page_meta)
    content_type = page_content_type(page_content)
    is_commerce = is_commerce_type(content_type)
    title = page_content.get('pageTitle') or ''

    meta_line = []
    if page_content.get('lastUpdated'):
        meta_line.append(f'<span class="last-updated">Last updated: {esc(format_date(page_content["lastUpdated"]))}</span>')
    if stats['hasStats']:
        meta_line.append(research_badge(stats['itemsAnalyzed'], stats['itemsFeatured'], stats['selectivity']))

    disclosure = ''
    if is_commerce and page_content.get('disclosure'):
        disclosure = f'<aside class="disclosure"><p>{esc(page_content["disclosure"])}</p></aside>'

    items = '\n'.join(render_item_card(item, content_type) for item in page_content.get('items') or [])

    return join_lines([
        '<div class="content-page">',
        breadcrumbs([('Home', '/'), (category.get('categoryTitle') or category_id, f'/{category_id}'), (title, None)]),
        f'<h1>{esc(title)}</h1>',
        f'<div class="page-meta">{" ".join(meta_line)}</div>' if meta_line else '',
        disclosure,
        _research_section(stats, page_meta, is_commerce),
        f'<p class="introduction">{esc(page_content.get("introduction"))}</p>' if page_content.get('introduction') else '',
        header_slot,
        '<section class="items">',
        f'  <h2>{"Detailed Reviews" if is_commerce else "Complete List"}</h2>',
        items,
        '</section>',
        faq(page_content.get('faq')),
        footer_slot,
        related_pages((page_content.get('relatedContent') or {}).get('pages')),
        '</div>',
    ])


def render_commerce_page(page_content, page_meta, category, category_id) -> str:
    """Comparison table above the items; buyer guide and verdict below."""
    table = (page_content.get('comparisonTable') or {})
    header_slot = comparison_table(page_content.get('items') or []) if table.get('enabled') else ''
    footer_slot = join_lines([
        buyer_guide(page_content.get('buyerGuide')),
        final_recommendation(page_content.get('finalRecommendation')),
    ])
    return render_base_page(page_content, page_meta, category, category_id, header_slot, footer_slot)


def render_place_page(page_content, page_meta, category, category_id) -> str:
    section = (page_content.get('additionalSections') or {}).get('locationMap')
    return render_base_page(page_content, page_meta, category, category_id, footer_slot=location_map(section))


PAGE_LAYOUT_MAP: Dict[str, Callable[..., str]] = {
    PHYSICAL_PRODUCT: render_commerce_page,
    SERVICE_OFFER: render_commerce_page,
    PLACE: render_place_page,
}


def render_content_page(
    page_content: Dict[str, Any],
    page_meta: Dict[str, Any],
    category: Dict[str, Any],
    category_id: str,
) -> str:
    """Dispatch to the layout registered for the page's ``pageContentType``."""
    layout: Optional[Callable[..., str]] = PAGE_LAYOUT_MAP.get(page_content_type(page_content) or '')
    return (layout or render_base_page)(page_content, page_meta, category, category_id)
