"""Selectivity statistics for pages, categories and the whole site.

Percentages are rounded half-up to one decimal place on the exact value of the
ratio, so ``12/120`` gives ``10.0`` and ``1/8`` gives ``12.5``. Nothing here
divides by zero: a page or category with no analyzed items reports 0.
"""

from __future__ import annotations

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from .text_utils import format_count

_ONE_DECIMAL = Decimal("0.1")


def _decimal(value: Any) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _round1(value: Any) -> float:
    return float(_decimal(value).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def _as_number(value: Any) -> float:
    """Coerce a count to a number; missing or malformed values count as 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        number = value if isinstance(value, (int, float)) else float(value)
    except (TypeError, ValueError):
        return 0
    return number if math.isfinite(number) else 0


def _count(record: Dict[str, Any], *keys: str) -> float:
    """Return the first truthy count among *keys* (0 when none is present)."""
    for key in keys:
        value = _as_number(record.get(key))
        if value:
            return int(value) if float(value).is_integer() else value
    return 0


def calculate_selectivity(featured: Any, analyzed: Any) -> float:
    """Percentage of analyzed items that were featured, one decimal.

    Returns 0.0 when either count is missing or zero.
    """
    featured_n = _as_number(featured)
    analyzed_n = _as_number(analyzed)
    if not analyzed_n or not featured_n:
        return 0.0
    return _round1(_decimal(featured_n) * 100 / _decimal(analyzed_n))


def calculate_rejection_rate(featured: Any, analyzed: Any) -> float:
    """Percentage of analyzed items that were filtered out, one decimal.

    Complements :func:`calculate_selectivity` to exactly 100 whenever anything
    was analyzed; 0.0 when nothing was.
    """
    if not _as_number(analyzed):
        return 0.0
    return _round1(100 - _decimal(calculate_selectivity(featured, analyzed)))


def format_one_decimal(value: Any) -> str:
    """Render a number with exactly one decimal, rounding half-up."""
    return f"{_decimal(_as_number(value)).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP)}"


def format_percentage(value: Any) -> str:
    """One-decimal percentage string without the sign (``10 -> '10.0'``)."""
    return format_one_decimal(value)


def format_price_range(price_range: Any) -> Optional[str]:
    """Render a price range given as a string or a ``{min, max}`` mapping."""
    if not price_range:
        return None
    if isinstance(price_range, str):
        return price_range
    if isinstance(price_range, dict):
        def bound(key: str) -> str:
            value = price_range.get(key)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return f"{value:.2f}"
            return "?"
        return f"${bound('min')}-${bound('max')}"
    return str(price_range)


def format_page_stats(page: Dict[str, Any]) -> Dict[str, Any]:
    """Derive the research statistics shown for a single page.

    Accepts a camelCase page summary and tolerates stray snake_case count keys.
    """
    page = page or {}
    analyzed = _count(page, 'itemsAnalyzed', 'items_analyzed')
    featured = _count(page, 'itemsFeatured', 'items_featured')
    metadata = page.get('metadata') or {}

    avg_rating = metadata.get('avgRating')
    total_reviews = metadata.get('totalReviews')
    price_range = metadata.get('priceRange')
    diversity = metadata.get('diversityMetric')

    return {
        'itemsAnalyzed': analyzed,
        'itemsFeatured': featured,
        'selectivity': calculate_selectivity(featured, analyzed),
        'rejectionRate': calculate_rejection_rate(featured, analyzed),
        'hasStats': analyzed > 0,
        'avgRating': avg_rating,
        'totalReviews': total_reviews,
        'priceRange': price_range,
        'diversityMetric': diversity,
        'reviewsDisplay': f"{format_count(total_reviews)}+ verified reviews" if total_reviews else None,
        'priceDisplay': format_price_range(price_range),
        'ratingDisplay': f"{format_one_decimal(avg_rating)}★ average" if avg_rating else None,
        'diversityDisplay': (
            f"{diversity.get('count')} {diversity.get('label')}"
            if isinstance(diversity, dict) else None
        ),
    }


def merge_diversity_metrics(metrics: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Merge diversity metrics by ``type``, keeping the largest count.

    The label comes from the first metric seen for a type and types keep
    first-seen order. Metrics without a string ``type`` are skipped.
    """
    merged: Dict[str, Dict[str, Any]] = {}
    for metric in metrics:
        if not isinstance(metric, dict):
            continue
        metric_type = metric.get('type')
        if not isinstance(metric_type, str):
            continue
        entry = merged.setdefault(metric_type, {'type': metric_type, 'count': 0, 'label': metric.get('label', '')})
        entry['count'] = max(entry['count'], _as_number(metric.get('count')))
    return list(merged.values())


def calculate_category_stats(category: Dict[str, Any]) -> Dict[str, Any]:
    """Aggregate page-level counts and diversity metrics for a category."""
    pages = (category or {}).get('pages') or []
    total_analyzed = 0
    total_featured = 0
    metrics = []

    for page in pages:
        total_analyzed += _count(page, 'itemsAnalyzed', 'items_analyzed')
        total_featured += _count(page, 'itemsFeatured', 'items_featured')
        diversity = (page.get('metadata') or {}).get('diversityMetric')
        if diversity:
            metrics.append(diversity)

    return {
        'totalAnalyzed': total_analyzed,
        'totalFeatured': total_featured,
        'selectivity': calculate_selectivity(total_featured, total_analyzed),
        'rejectionRate': calculate_rejection_rate(total_featured, total_analyzed),
        'totalPages': len(pages),
        'diversityMetrics': merge_diversity_metrics(metrics),
        'hasStats': total_analyzed > 0,
    }


def calculate_site_stats(site_config: Dict[str, Any]) -> Dict[str, Any]:
    """Site-wide totals for the home page trust badges.

    The published ``stats`` block wins; without one the totals are derived
    from the categories.
    """
    site_config = site_config or {}
    published = site_config.get('stats')
    categories = site_config.get('categories') or []

    if published:
        analyzed = _count(published, 'totalItemsAnalyzed')
        featured = _count(published, 'totalItemsFeatured')
        total_pages = _count(published, 'totalPages')
        total_categories = _count(published, 'totalCategories')
        last_updated = published.get('lastUpdated')
    else:
        per_category = [calculate_category_stats(category) for category in categories]
        analyzed = sum(s['totalAnalyzed'] for s in per_category)
        featured = sum(s['totalFeatured'] for s in per_category)
        total_pages = sum(s['totalPages'] for s in per_category)
        total_categories = len(categories)
        last_updated = None

    return {
        'totalItemsAnalyzed': analyzed,
        'totalItemsFeatured': featured,
        'totalPages': total_pages,
        'totalCategories': total_categories,
        'selectivity': calculate_selectivity(featured, analyzed),
        'lastUpdated': last_updated,
        'hasStats': analyzed > 0,
    }
