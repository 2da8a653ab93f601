"""
Game module.

Provides game state and the navigation core:
- GameSession: Tracks current game state
- GridCell: One board square
- GameResult: Snapshot for leaderboards/replays
- NavigationController: Runs navigations for a session
"""

from wikibingo.game.engine import NavigationController
from wikibingo.game.events import GameEvents
from wikibingo.game.state import GameResult, GameSession, GridCell, LineId

__all__ = [
    "GameEvents",
    "GameResult",
    "GameSession",
    "GridCell",
    "LineId",
    "NavigationController",
]
