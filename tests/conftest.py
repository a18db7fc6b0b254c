import sys
from datetime import datetime
from pathlib import Path

import pytest

# Make ``scripts`` importable the same way the scripts themselves do it.
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from trend_engine.models import TrendRecord, TrendSource, make_record  # noqa: E402


@pytest.fixture
def fixed_now() -> datetime:
    """A Monday afternoon in October."""
    return datetime(2026, 10, 19, 14, 30)


@pytest.fixture
def record_factory():
    def _make(title: str, score: int, source: TrendSource = TrendSource.SEARCH_TRENDS, category: str = "Trending") -> TrendRecord:
        return make_record(title, category, source, score)

    return _make
