"""
Grid matching for a completed navigation.

Matching is redirect-aware in both directions:
- the clicked title redirects to a grid title ("Banana fruit" -> "Banana")
- a grid title redirects to the clicked title
"""

from __future__ import annotations

import logging

from wikibingo.game.events import MATCH, GameEvents
from wikibingo.game.state import GameSession, GridCell
from wikibingo.wikipedia.redirects import RedirectResolver
from wikibingo.wikipedia.titles import normalize_title

logger = logging.getLogger(__name__)


def _keys(*titles: str | None) -> set[str]:
    return {key for key in map(normalize_title, titles) if key}


class MatchEngine:
    """Marks grid cells visited by a navigation and reports new matches."""

    def __init__(self, resolver: RedirectResolver, events: GameEvents) -> None:
        self._resolver = resolver
        self._events = events

    async def _resolve_cells(self, cells: list[GridCell]) -> None:
        """Fill in canonical titles for cells that do not have one yet."""
        pending = [cell for cell in cells if cell.canonical_title is None]
        if not pending:
            return
        resolved = await self._resolver.resolve_many(cell.title for cell in pending)
        for cell, canonical in zip(pending, resolved):
            cell.canonical_title = canonical

    async def apply(self, session: GameSession, clicked: str, canonical: str) -> list[str]:
        """
        Match a navigation against the board.

        Args:
            session: Game to update
            clicked: Title as the player clicked it
            canonical: Redirect-resolved form of clicked

        Returns:
            Grid titles matched by this navigation (empty on revisits)
        """
        if session.game_won:
            return []

        await self._resolve_cells(session.grid)

        click_keys = _keys(clicked, canonical)
        newly_matched: list[str] = []

        for cell in session.grid:
            if cell.key in session.matched_set:
                continue
            if click_keys & _keys(cell.title, cell.canonical_title):
                cell.matched = True
                session.matched_set.add(cell.key)
                newly_matched.append(cell.title)
                logger.info(f"Matched '{cell.title}' (cell {cell.position}) via '{clicked}'")

        for title in newly_matched:
            self._events.emit(MATCH, title)
        return newly_matched
