"""
Replacement of articles that cannot be loaded.

When an article fails on every endpoint the player never sees an error
page: the grid cell (or the article being shown) is swapped for a fresh
curated title that is not already in play.
"""

from __future__ import annotations

import logging
from typing import Iterable, Union

from wikibingo.data.pool import ReplacementSource
from wikibingo.game.state import GameSession
from wikibingo.wikipedia.errors import ReplacementError
from wikibingo.wikipedia.titles import normalize_title

logger = logging.getLogger(__name__)

# Slot value meaning "the article currently being shown"
CURRENT_ARTICLE = "current"

Slot = Union[int, str]


class ArticleReplacer:
    """Swaps failed titles for replacements from the curated pool."""

    def __init__(self, source: ReplacementSource) -> None:
        self._source = source

    def replace(
        self,
        session: GameSession,
        slot: Slot,
        exclude: Iterable[str] = (),
    ) -> str:
        """
        Replace the title in a slot.

        Args:
            session: Game to update
            slot: Grid position (0-24) or CURRENT_ARTICLE
            exclude: Extra titles to avoid, e.g. ones that already failed

        Returns:
            The replacement title

        Raises:
            ReplacementError: No distinct title available
            IndexError: Grid position out of range
        """
        if slot != CURRENT_ARTICLE and not 0 <= int(slot) < len(session.grid):
            raise IndexError(f"No grid cell at position {slot}")

        excluded = session.titles_in_play()
        excluded.update(normalize_title(t) for t in exclude)
        replacement = self._source.get_replacement_title(excluded)
        key = normalize_title(replacement)
        if not key or key in excluded:
            raise ReplacementError(f"Replacement '{replacement}' is already in play")

        if slot == CURRENT_ARTICLE:
            failed = session.current_article
            session.replace_current_article(replacement)
        else:
            cell = session.grid[int(slot)]
            failed = cell.title
            cell.title = replacement
            cell.matched = False
            cell.canonical_title = None

        logger.warning(f"Replaced '{failed}' with '{replacement}' (slot {slot})")
        return replacement
