"""
Win detection for the 5x5 board.

A line wins when all five of its cells are matched. Several lines can
complete on the same navigation; all of them are recorded.
"""

from __future__ import annotations

import logging

from wikibingo.game.events import WIN, GameEvents
from wikibingo.game.state import WIN_LINES, GameSession, LineId

logger = logging.getLogger(__name__)


def completed_lines(session: GameSession) -> set[LineId]:
    """Every line whose cells are all in the session's matched set."""
    return {
        line
        for line, indices in WIN_LINES.items()
        if all(session.is_cell_matched(i) for i in indices)
    }


def winning_cells(session: GameSession) -> list[int]:
    """Sorted board indices that belong to a winning line."""
    cells: set[int] = set()
    for line in session.winning_lines:
        cells.update(line.indices)
    return sorted(cells)


class WinDetector:
    """Records completed lines and ends the game on the first one."""

    def __init__(self, events: GameEvents) -> None:
        self._events = events

    def check(self, session: GameSession) -> set[LineId]:
        """
        Re-scan all lines after a match.

        Returns:
            Lines newly added to session.winning_lines
        """
        if session.game_won:
            return set()

        new_lines = completed_lines(session) - session.winning_lines
        if not new_lines:
            return set()

        session.winning_lines |= new_lines
        session.game_won = True
        session.final_clicks = session.clicks
        session.timer.stop()

        lines = ", ".join(sorted(line.value for line in session.winning_lines))
        logger.info(
            f"Won! {lines} after {session.clicks} clicks "
            f"({session.elapsed_seconds}s)"
        )
        self._events.emit(WIN, set(session.winning_lines))
        return new_lines
