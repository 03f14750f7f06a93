"""Configuration management for the YAML config file."""

import os
import logging
import shutil
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .paths import get_data_dir, get_system_path

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = get_data_dir() / "config"
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.yaml"
_TEMPLATE_CONFIG = get_system_path("config", "config.yaml")

BASE_URL_ENV = "CONTENT_BASE_URL"
SITE_ID_ENV = "SITE_ID"

_DEFAULT_CONFIG_TEMPLATE = """# Auto-generated default configuration for review-site
content:
  base_url: "https://content.example.com"
  site_id: "example-site"

http:
  timeout: 15
  max_retries: 3
  rps: 10.0

output:
  directory: "site"
  template: "site_template.html"
"""

_DEFAULT_HTTP = {"timeout": 15, "max_retries": 3, "rps": 10.0}


def _write_template(path: Path, content: str) -> None:
    """Write templated YAML content to disk with a trailing newline."""
    path.write_text(content.strip() + "\n", encoding="utf-8")


class ConfigManager:
    """Manages loading and validation of the YAML configuration file."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize the manager and ensure a baseline config file exists."""
        path = Path(config_path or DEFAULT_CONFIG_PATH).expanduser()
        if not path.is_absolute():
            path = path.resolve()
        self.config_path = str(path)
        self.base_dir = str(path.parent)
        self._config = None
        self._ensure_default_config()

    def load_config(self) -> Dict[str, Any]:
        """Load the main configuration file."""
        if self._config is None:
            try:
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    self._config = yaml.safe_load(f) or {}
                logger.info(f"Loaded configuration from {self.config_path}")
            except Exception as e:
                logger.error(f"Failed to load config from {self.config_path}: {e}")
                raise

        return self._config

    def _ensure_default_config(self) -> None:
        """Create the default configuration file if it is missing."""
        config_file = Path(self.config_path)
        config_file.parent.mkdir(parents=True, exist_ok=True)

        if config_file.exists():
            return

        if _TEMPLATE_CONFIG.exists():
            try:
                shutil.copyfile(_TEMPLATE_CONFIG, config_file)
                logger.info("Created default config.yaml at %s", config_file)
                return
            except OSError as exc:
                logger.warning("Failed to copy template config: %s", exc)

        _write_template(config_file, _DEFAULT_CONFIG_TEMPLATE)
        logger.info("Created fallback default config.yaml at %s", config_file)

    def get_content_settings(self) -> Dict[str, str]:
        """Return the content store location, honoring environment overrides.

        ``CONTENT_BASE_URL`` and ``SITE_ID`` take precedence over the file.
        """
        config = self.load_config()
        content = config.get('content') or {}
        base_url = os.getenv(BASE_URL_ENV) or content.get('base_url') or ''
        site_id = os.getenv(SITE_ID_ENV) or content.get('site_id') or ''
        return {
            'base_url': str(base_url).rstrip('/'),
            'site_id': str(site_id).strip('/'),
        }

    def get_http_settings(self) -> Dict[str, Any]:
        """Return HTTP client settings merged over the defaults."""
        config = self.load_config()
        settings = dict(_DEFAULT_HTTP)
        settings.update(config.get('http') or {})
        return settings

    def get_output_settings(self) -> Dict[str, str]:
        """Return output directory and template name."""
        config = self.load_config()
        output = config.get('output') or {}
        return {
            'directory': output.get('directory', 'site'),
            'template': output.get('template', 'site_template.html'),
        }

    def validate_config(self) -> bool:
        """Validate the configuration file."""
        try:
            config = self.load_config()
            if not isinstance(config, dict):
                logger.error("Configuration root must be a mapping")
                return False

            content = self.get_content_settings()
            for key in ('base_url', 'site_id'):
                if not content[key]:
                    logger.error(f"Missing required content setting '{key}'")
                    return False

            if not content['base_url'].startswith(('http://', 'https://')):
                logger.error(f"content.base_url must be an http(s) URL, got '{content['base_url']}'")
                return False

            http_cfg = config.get('http') or {}
            if not isinstance(http_cfg, dict):
                logger.error("'http' must be a mapping")
                return False
            for key in ('timeout', 'max_retries', 'rps'):
                value = http_cfg.get(key)
                if value is not None and not isinstance(value, (int, float)):
                    logger.error(f"http.{key} must be a number (int/float)")
                    return False

            output = config.get('output') or {}
            if not isinstance(output, dict):
                logger.error("'output' must be a mapping")
                return False

            logger.info("Configuration validation passed")
            return True

        except Exception as e:
            logger.error(f"Configuration validation failed: {e}")
            return False


__all__ = [
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_CONFIG_DIR",
]
