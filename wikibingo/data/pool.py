"""
Curated article pool used to replace articles that fail to load.

Usage:
    from wikibingo.data.pool import CuratedPool

    pool = CuratedPool()  # reads CURATED_ARTICLES_PATH on first use
    pool.get_replacement_title({"banana", "apple"})

The JSON file has the shape produced by the pool generator:
    {"categories": [{"name": ..., "articles": ["Title", {"title": ...}]}],
     "groups": {...}}
Only the categories are read here.
"""

from __future__ import annotations

import json
import logging
import random
from pathlib import Path
from typing import Iterable, Protocol

from wikibingo.config import CURATED_ARTICLES_PATH
from wikibingo.wikipedia.errors import ReplacementError
from wikibingo.wikipedia.titles import normalize_title

logger = logging.getLogger(__name__)


class ReplacementSource(Protocol):
    """Anything that can hand out a title not in the exclusion set."""

    def get_replacement_title(self, exclude: Iterable[str]) -> str:
        ...


def article_title(article: str | dict) -> str:
    """Curated entries are either a bare title or {"title": ..., "url": ...}."""
    if isinstance(article, str):
        return article
    return str(article.get("title", ""))


class CuratedPool:
    """
    Lazy-loading view of the curated article pool.

    Attributes:
        path: JSON file to load from (unused when categories are given)
    """

    def __init__(
        self,
        path: Path = CURATED_ARTICLES_PATH,
        categories: list[dict] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """
        Initialize the pool.

        Args:
            path: Curated articles JSON file
            categories: Pre-loaded categories (skips reading the file)
            rng: Random source, seedable for tests
        """
        self.path = Path(path)
        self._categories = categories
        self._titles: list[str] | None = None
        self._rng = rng or random.Random()

    def _ensure_loaded(self) -> None:
        """Load and flatten the categories on first access."""
        if self._titles is not None:
            return

        if self._categories is None:
            logger.info(f"Loading curated articles from {self.path}...")
            with open(self.path, encoding="utf-8") as f:
                payload = json.load(f)
            self._categories = payload.get("categories", [])

        titles: list[str] = []
        seen: set[str] = set()
        for category in self._categories:
            for article in category.get("articles") or []:
                title = article_title(article)
                key = normalize_title(title)
                if key and key not in seen:
                    seen.add(key)
                    titles.append(title)

        self._titles = titles
        logger.info(f"Loaded {len(titles):,} curated titles from {len(self._categories)} categories")

    def title_count(self) -> int:
        self._ensure_loaded()
        return len(self._titles)

    def get_replacement_title(self, exclude: Iterable[str]) -> str:
        """
        Pick a random curated title that is not excluded.

        Args:
            exclude: Titles already in play (any formatting)

        Raises:
            ReplacementError: If every curated title is excluded
        """
        self._ensure_loaded()
        excluded = {normalize_title(t) for t in exclude}
        candidates = [t for t in self._titles if normalize_title(t) not in excluded]
        if not candidates:
            raise ReplacementError("No curated titles left outside the excluded set")
        return self._rng.choice(candidates)
