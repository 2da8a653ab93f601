"""
Tests for the shipped curated pool and sample game.

Note: The curated pool tests are skipped if the data file is missing
(e.g. when WIKIBINGO_DATA_DIR points elsewhere).
"""

import json

import pytest

from wikibingo.config import CURATED_ARTICLES_PATH, validate_data_files
from wikibingo.data import CuratedPool
from wikibingo.game import GameSession
from wikibingo.wikipedia.titles import normalize_title

requires_pool = pytest.mark.skipif(
    not all(validate_data_files().values()),
    reason="Data files not available",
)


@pytest.fixture(scope="module")
def curated_pool():
    """Load the curated pool once for all tests in this module."""
    pool = CuratedPool(CURATED_ARTICLES_PATH)
    _ = pool.title_count()
    return pool


@pytest.fixture
def sample_titles(project_root):
    with open(project_root / "games" / "sample.json", encoding="utf-8") as f:
        return json.load(f)["titles"]


@requires_pool
class TestCuratedPool:
    """Test the shipped curated articles."""

    def test_has_titles(self, curated_pool):
        """Pool should not be empty."""
        assert curated_pool.title_count() > 0

    def test_replacement_is_not_excluded(self, curated_pool, sample_titles):
        """A replacement never collides with the sample game."""
        excluded = {normalize_title(t) for t in sample_titles}
        for _ in range(20):
            title = curated_pool.get_replacement_title(sample_titles)
            assert normalize_title(title) not in excluded


class TestSampleGame:
    """Test the sample game file."""

    def test_builds_session(self, sample_titles):
        """26 titles: a valid grid plus a start."""
        session = GameSession.from_titles(sample_titles)
        assert session.start_title == sample_titles[-1]
        assert len(session.grid) == 25
