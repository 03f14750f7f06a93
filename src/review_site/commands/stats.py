"""
Stats command implementation.
Reports per-category and site-wide research statistics from the site config.
"""

import logging
from typing import Any, Dict, Optional

from ..core import catalog
from ..core.command_context import CommandContext
from ..core.content_store import ContentStore
from ..core.stats import calculate_category_stats, calculate_site_stats, format_page_stats

logger = logging.getLogger(__name__)


def run(
    config_path: str,
    category: Optional[str] = None,
    store: Optional[ContentStore] = None,
) -> Dict[str, Any]:
    """Build the statistics report.

    Args:
        config_path: Path to the main configuration file
        category: Optional category id to restrict the report to
        store: Optional pre-built content store

    Returns:
        ``{'site': {...}, 'categories': [{...}, ...]}``
    """
    with CommandContext(config_path, store=store) as ctx:
        site_config = ctx.store.fetch_site_config()

    categories = catalog.categories(site_config)
    if category:
        categories = [c for c in categories if c.get('categoryId') == category]
        if not categories:
            raise ValueError(f"Unknown category: {category}")

    report = {
        'site': calculate_site_stats(site_config),
        'categories': [],
    }
    for entry in categories:
        pages = []
        for page in entry.get('pages') or []:
            page_stats = format_page_stats(page)
            pages.append({
                'pageId': page.get('pageId'),
                'itemsAnalyzed': page_stats['itemsAnalyzed'],
                'itemsFeatured': page_stats['itemsFeatured'],
                'selectivity': page_stats['selectivity'],
                'rejectionRate': page_stats['rejectionRate'],
            })
        report['categories'].append({
            'categoryId': entry.get('categoryId'),
            'categoryTitle': entry.get('categoryTitle'),
            **calculate_category_stats(entry),
            'pages': pages,
        })

    logger.info(f"Computed stats for {len(report['categories'])} categories")
    return report
