"""The API reference lists every module (namespace packages are not auto-discovered)."""

from __future__ import annotations

from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
PACKAGE_DIR = REPO_ROOT / "src" / "review_site"
INDEX_RST = REPO_ROOT / "docs" / "index.rst"


def _module_names():
    for path in sorted(PACKAGE_DIR.rglob("*.py")):
        relative = path.relative_to(PACKAGE_DIR.parent).with_suffix("")
        parts = relative.parts[:-1] if relative.name == "__init__" else relative.parts
        yield ".".join(parts)


def test_index_lists_every_module():
    listed = {line.strip() for line in INDEX_RST.read_text(encoding="utf-8").splitlines()}

    missing = [name for name in _module_names() if name not in listed]

    assert missing == []
