import sys
from pathlib import Path

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[2]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from review_site.commands import stats  # noqa: E402


def test_stats_reports_site_and_categories(config_file, store):
    report = stats.run(str(config_file), store=store)

    assert report['site']['totalItemsAnalyzed'] == 195
    assert report['site']['totalItemsFeatured'] == 23
    assert report['site']['totalCategories'] == 4
    assert [c['categoryId'] for c in report['categories']] == ["kitchen", "travel", "people", "garden"]

    kitchen = report['categories'][0]
    assert kitchen['totalAnalyzed'] == 165
    assert kitchen['selectivity'] == 10.3
    assert kitchen['rejectionRate'] == 89.7
    assert kitchen['pages'][0] == {
        'pageId': "best-chef-knives",
        'itemsAnalyzed': 120,
        'itemsFeatured': 12,
        'selectivity': 10.0,
        'rejectionRate': 90.0,
    }


def test_stats_for_one_category(config_file, store):
    report = stats.run(str(config_file), category="people", store=store)

    assert len(report['categories']) == 1
    people = report['categories'][0]
    assert people['hasStats'] is False
    assert people['rejectionRate'] == 0.0
    assert [p['pageId'] for p in people['pages']] == ["top-chefs", "missing-page"]


def test_stats_unknown_category_raises(config_file, store):
    with pytest.raises(ValueError):
        stats.run(str(config_file), category="nope", store=store)
