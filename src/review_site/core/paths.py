"""Where review-site keeps its runtime files.

The data directory holds the editable config, the HTML template and, by
default, the built site. Its location is ``$REVIEW_SITE_DATA_DIR`` when set,
otherwise ``~/.review_site``. The first time it is used it is seeded with the
``config/`` and ``templates/`` folders bundled under ``review_site/system``.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path

DATA_DIR_ENV = "REVIEW_SITE_DATA_DIR"
DEFAULT_DIRNAME = ".review_site"
SEEDED_FOLDERS = ("config", "templates")

_SYSTEM_DIR = Path(__file__).resolve().parents[1] / "system"


def get_data_dir() -> Path:
    """Return the runtime data directory (not created).

    A relative ``REVIEW_SITE_DATA_DIR`` is taken relative to the current
    working directory; an empty one is ignored.
    """
    override = (os.getenv(DATA_DIR_ENV) or "").strip()
    if override:
        return Path(override).expanduser().resolve()
    return (Path.home() / DEFAULT_DIRNAME).resolve()


def ensure_data_dir() -> Path:
    """Create the data directory if needed, seed it, and return it."""
    data_dir = get_data_dir()
    data_dir.mkdir(parents=True, exist_ok=True)
    for name in SEEDED_FOLDERS:
        source = _SYSTEM_DIR / name
        target = data_dir / name
        # Existing folders are user territory; only missing ones are seeded.
        if source.is_dir() and not target.exists():
            shutil.copytree(source, target, dirs_exist_ok=True)
    return data_dir


def resolve_data_path(*relative: str, ensure_parent: bool = False) -> Path:
    """Join *relative* onto the data directory.

    A leading ``.review_site`` component is dropped so config values written
    relative to the home directory keep working.
    """
    parts = Path(*relative).parts if relative else ()
    if parts and parts[0] == DEFAULT_DIRNAME:
        parts = parts[1:]
    full_path = ensure_data_dir().joinpath(*parts)
    if ensure_parent:
        full_path.parent.mkdir(parents=True, exist_ok=True)
    return full_path


def resolve_data_dir(*relative: str, ensure_exists: bool = False) -> Path:
    """Like :func:`resolve_data_path` for directories; absolute paths are kept as given."""
    candidate = Path(*relative).expanduser() if relative else Path()
    directory = candidate if candidate.is_absolute() else resolve_data_path(*relative)
    if ensure_exists:
        directory.mkdir(parents=True, exist_ok=True)
    return directory


def get_system_path(*relative: str) -> Path:
    """Return a path inside the bundled ``system`` directory."""
    return _SYSTEM_DIR.joinpath(*relative)


__all__ = [
    "DATA_DIR_ENV",
    "get_data_dir",
    "ensure_data_dir",
    "resolve_data_path",
    "resolve_data_dir",
    "get_system_path",
]
