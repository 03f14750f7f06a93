from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

from .commands import build as build_cmd
from .commands import render as render_cmd
from .commands import stats as stats_cmd
from .core.config import ConfigManager, DEFAULT_CONFIG_PATH
from .core.paths import get_data_dir

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = str(DEFAULT_CONFIG_PATH)

__all__ = [
    'build',
    'stats',
    'status',
    'render',
]


def build(
    category: Optional[str] = None,
    *,
    output_dir: Optional[str] = None,
    config_path: Optional[str] = None,
) -> Dict[str, Any]:
    """Render the site (or one category) into the output directory.

    Args:
        category: Optional category id; when omitted every route is built.
        output_dir: Optional output directory; relative paths land in the data dir.
        config_path: Path to main YAML config; defaults to the data-dir config.

    Returns:
        Build summary with ``output_dir``, ``pages``, ``not_found`` and ``failed``.
    """
    cfg_path = config_path or _DEFAULT_CONFIG
    return build_cmd.run(cfg_path, category, output_dir)


def stats(category: Optional[str] = None, config_path: Optional[str] = None) -> Dict[str, Any]:
    """Return site and per-category research statistics."""
    cfg_path = config_path or _DEFAULT_CONFIG
    return stats_cmd.run(cfg_path, category)


def render(path: str = '/', config_path: Optional[str] = None) -> str:
    """Render a single route and return its HTML (the not-found page for unknown routes)."""
    cfg_path = config_path or _DEFAULT_CONFIG
    return render_cmd.run(cfg_path, path).html


def status(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Return configuration and environment status for programmatic use."""
    cfg_path = config_path or _DEFAULT_CONFIG
    info: Dict[str, Any] = {'config_path': cfg_path, 'data_dir': str(get_data_dir())}
    if not os.path.exists(cfg_path) and cfg_path != _DEFAULT_CONFIG:
        info.update({'valid': False, 'error': f'Config file not found: {cfg_path}'})
        return info
    try:
        cm = ConfigManager(cfg_path)
        valid = cm.validate_config()
        info.update({
            'valid': bool(valid),
            'content': cm.get_content_settings(),
            'output': cm.get_output_settings(),
        })
        return info
    except Exception as e:
        info.update({'valid': False, 'error': str(e)})
        return info
