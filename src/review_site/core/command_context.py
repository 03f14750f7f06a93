"""
Command context for shared initialization across CLI commands.

Loads and validates the configuration once and wires up the HTTP client and
content store so individual commands only deal with rendering.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .config import ConfigManager
from .content_store import ContentStore
from .http_client import RetryableHTTPClient
from .paths import resolve_data_dir


logger = logging.getLogger(__name__)


class CommandContext:
    """Encapsulates shared initialization logic for CLI commands.

    Example:
        ```python
        with CommandContext(config_path) as ctx:
            site_config = ctx.store.fetch_site_config()
        ```
    """

    def __init__(self, config_path: Optional[str] = None, store: Optional[ContentStore] = None):
        """Initialize command context with config and content store.

        Args:
            config_path: Path to main config file (None = use default)
            store: Pre-built content store (tests inject one backed by fixtures)

        Raises:
            ValueError: If configuration is invalid
        """
        self.config_manager = ConfigManager(config_path)

        if not self.config_manager.validate_config():
            raise ValueError("Invalid configuration. Run 'review-site status' for details.")

        self.config = self.config_manager.load_config()
        self.content_settings = self.config_manager.get_content_settings()
        self.output_settings = self.config_manager.get_output_settings()

        if store is None:
            http = self.config_manager.get_http_settings()
            client = RetryableHTTPClient(
                rps=float(http['rps']),
                max_retries=int(http['max_retries']),
                timeout=http['timeout'],
            )
            store = ContentStore(self.content_settings['base_url'], self.content_settings['site_id'], client)
        self.store = store

        logger.debug(f"CommandContext initialized with config from {self.config_manager.config_path}")

    def output_dir(self, override: Optional[str] = None) -> Path:
        """Resolve the output directory (relative paths land in the data dir)."""
        return resolve_data_dir(override or self.output_settings['directory'], ensure_exists=True)

    def close(self) -> None:
        self.store.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
