import sys
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[2]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from review_site.commands import render  # noqa: E402


def test_render_single_route(config_file, store, data_dir):
    result = render.run(str(config_file), "/kitchen/best-chef-knives", store=store)

    assert result.status == 200
    assert "Best Chef Knives" in result.html
    assert not (data_dir / "site" / "kitchen").exists()


def test_render_unknown_route(config_file, store):
    result = render.run(str(config_file), "/does/not/exist/here", store=store)
    assert result.status == 404
