"""
Item cards keyed by content type.

``render_base_card`` draws the fields every item shares; the per-type cards
pass an accent, an attributes label and an HTML *slot* rendered between the
attributes and the description. ``ITEM_CARD_MAP`` is the only place that
knows which card belongs to which content type.
"""

from typing import Any, Callable, Dict, Optional

from ..core.schema import (
    LIST_ITEM,
    PERSON,
    PHYSICAL_PRODUCT,
    PLACE,
    SERVICE_OFFER,
    get_commerce,
    get_location,
    get_pricing,
)
from .components import (
    attributes,
    cta_buttons,
    esc,
    highlights,
    join_lines,
    maps_search_url,
    media_block,
    rating_badge,
)


def render_base_card(
    item: Dict[str, Any],
    accent: str = 'blue',
    attributes_label: Optional[str] = 'Details',
    slot: str = '',
) -> str:
    """Render the universal item fields with an optional type-specific slot."""
    name = item.get('name') or ''
    badge = f'      <span class="item-badge">{esc(item["badge"])}</span>' if item.get('badge') else ''
    return join_lines([
        f'<article class="item-card item-card--{esc(accent)}" id="item-{esc(item.get("rank"))}">',
        '  <header class="item-card__header">',
        '    <div class="item-card__rank">',
        f'      <span class="item-rank">#{esc(item.get("rank"))}</span>',
        badge,
        '    </div>',
        f'    <h3>{esc(name)}</h3>',
        f'    <p class="item-tagline">{esc(item["tagline"])}</p>' if item.get('tagline') else '',
        '  </header>',
        '  <div class="item-card__body">',
        media_block(item.get('media'), name),
        f'<p class="item-summary">{esc(item["summary"])}</p>' if item.get('summary') else '',
        rating_badge(item.get('rating')),
        highlights(item.get('highlights')),
        attributes(item.get('attributes'), attributes_label),
        slot,
        f'<div class="prose item-description">{item["descriptionHtml"]}</div>' if item.get('descriptionHtml') else '',
        cta_buttons(item.get('cta')),
        '  </div>',
        '</article>',
    ])


def _pricing_block(item: Dict[str, Any]) -> str:
    pricing = get_pricing(item)
    if not pricing:
        return ''
    notes = f' <span class="price-notes">{esc(pricing["notes"])}</span>' if pricing.get('notes') else ''
    price_type = ''
    if pricing.get('type'):
        price_type = f'  <span class="price-type">{esc(str(pricing["type"]).replace("_", " "))}</span>'
    return join_lines([
        '<div class="item-pricing">',
        f'  <span class="price-display">{esc(pricing.get("display"))}</span>{notes}',
        price_type,
        '</div>',
    ])


def _bullet_list(values, css_class: str, heading: str) -> str:
    if not values:
        return ''
    items = '\n'.join(f'      <li>{esc(v)}</li>' for v in values)
    return join_lines([
        f'  <div class="{css_class}">',
        f'    <h4>{heading}</h4>',
        '    <ul>',
        items,
        '    </ul>',
        '  </div>',
    ])


def render_commerce_card(item: Dict[str, Any]) -> str:
    """Products and offers: pricing, pros/cons and the editorial take."""
    commerce = get_commerce(item) or {}
    pros = commerce.get('pros') or []
    cons = commerce.get('cons') or []
    parts = [_pricing_block(item)]
    if pros or cons:
        parts.append(join_lines([
            '<div class="pros-cons">',
            _bullet_list(pros, 'pros', '&#10003; Pros'),
            _bullet_list(cons, 'cons', '&#10007; Cons'),
            '</div>',
        ]))
    review = commerce.get('review')
    if review:
        parts.append(join_lines([
            '<div class="item-review">',
            '  <h4>Our Take</h4>',
            f'  <p>{esc(review.get("editorial"))}</p>',
            f'  <p class="verdict">Verdict: {esc(review["verdict"])}</p>' if review.get('verdict') else '',
            '</div>',
        ]))
    return render_base_card(item, accent='blue', attributes_label='Key Features', slot=join_lines(parts))


def render_place_card(item: Dict[str, Any]) -> str:
    location = get_location(item) or {}
    slot = ''
    if location.get('address'):
        coords = location.get('coordinates')
        maps_link = ''
        if coords:
            maps_link = (
                f'  <a href="{esc(maps_search_url(coords.get("lat"), coords.get("lng")))}" '
                'target="_blank" rel="noopener noreferrer">View on Google Maps &rarr;</a>'
            )
        slot = join_lines([
            '<div class="item-location">',
            '  <h4>Location</h4>',
            f'  <p>{esc(location["address"])}</p>',
            maps_link,
            '</div>',
        ])
    return render_base_card(item, accent='emerald', attributes_label='Details', slot=slot)


def render_person_card(item: Dict[str, Any]) -> str:
    """People show their attributes as a stats grid instead of the default list."""
    attrs = item.get('attributes') or {}
    slot = ''
    if attrs:
        tiles = '\n'.join(
            f'    <div class="person-stat"><div class="person-stat__key">{esc(k)}</div>'
            f'<div class="person-stat__value">{esc(v)}</div></div>'
            for k, v in attrs.items()
        )
        slot = join_lines([
            '<div class="person-stats">',
            '  <h4>Stats &amp; Info</h4>',
            '  <div class="person-stats__grid">',
            tiles,
            '  </div>',
            '</div>',
        ])
    return render_base_card(item, accent='violet', attributes_label='', slot=slot)


def render_list_card(item: Dict[str, Any]) -> str:
    return render_base_card(item, accent='gray', attributes_label='Details')


ITEM_CARD_MAP: Dict[str, Callable[[Dict[str, Any]], str]] = {
    PHYSICAL_PRODUCT: render_commerce_card,
    SERVICE_OFFER: render_commerce_card,
    PLACE: render_place_card,
    PERSON: render_person_card,
    LIST_ITEM: render_list_card,
}


def render_item_card(item: Dict[str, Any], content_type: Optional[str]) -> str:
    """Render *item* with the card registered for *content_type* (base card otherwise)."""
    if not isinstance(content_type, str):
        return render_base_card(item)
    card = ITEM_CARD_MAP.get(content_type, render_base_card)
    return card(item)
