"""
Render command implementation.
Renders a single route without writing anything to disk.
"""

import logging
from typing import Optional

from ..core.command_context import CommandContext
from ..core.content_store import ContentStore
from ..processors.html_generator import HTMLGenerator
from ..processors.site_renderer import RenderResult, SiteRenderer

logger = logging.getLogger(__name__)


def run(config_path: str, path: str = '/', store: Optional[ContentStore] = None) -> RenderResult:
    """Render *path* and return the result (status 404 for unknown routes)."""
    with CommandContext(config_path, store=store) as ctx:
        renderer = SiteRenderer(ctx.store, HTMLGenerator(ctx.output_settings['template']))
        result = renderer.render(path)
    logger.debug(f"Rendered {result.path} with status {result.status}")
    return result
