"""
Build command implementation.

Renders every route of the site (or of one category) and writes the pages to
the output directory, followed by ``404.html``.
"""

import logging
from typing import Any, Dict, Optional

from ..core.command_context import CommandContext
from ..core.content_store import ContentStore
from ..processors.html_generator import NOT_FOUND_ROUTE, HTMLGenerator
from ..processors.site_renderer import SiteRenderer

logger = logging.getLogger(__name__)


def run(
    config_path: str,
    category: Optional[str] = None,
    output_dir: Optional[str] = None,
    store: Optional[ContentStore] = None,
) -> Dict[str, Any]:
    """
    Build the static site.

    Args:
        config_path: Path to the main configuration file
        category: Optional category id; only that category's routes are built
        output_dir: Optional output directory overriding ``output.directory``
        store: Optional pre-built content store

    Returns:
        Summary with the output directory, routes written, and the routes
        that rendered as not-found or failed.
    """
    logger.info("Starting site build")

    with CommandContext(config_path, store=store) as ctx:
        target_dir = ctx.output_dir(output_dir)
        generator = HTMLGenerator(ctx.output_settings['template'])
        renderer = SiteRenderer(ctx.store, generator)

        routes = renderer.static_routes(category)
        if category and not routes:
            raise ValueError(f"Unknown category: {category}")
        logger.info(f"Rendering {len(routes)} routes into {target_dir}")

        written = []
        not_found = []
        failed = []
        for route in routes:
            try:
                result = renderer.render(route)
            except Exception as e:
                logger.error(f"Error rendering '{route}': {e}")
                failed.append(route)
                result = renderer.render_not_found(route)

            if result.status == 404:
                logger.warning(f"Route '{route}' rendered as not found")
                not_found.append(route)
            try:
                generator.write_page(route, result.html, target_dir)
            except (OSError, ValueError) as e:
                logger.error(f"Error writing '{route}': {e}")
                if route not in failed:
                    failed.append(route)
                continue
            written.append(route)

        missing = renderer.render_not_found()
        generator.write_page(NOT_FOUND_ROUTE, missing.html, target_dir)

    logger.info(
        "Build finished: %d pages written, %d not found, %d failed",
        len(written), len(not_found), len(failed),
    )
    return {
        'output_dir': str(target_dir),
        'pages': written,
        'not_found': [r for r in not_found if r not in failed],
        'failed': failed,
    }
