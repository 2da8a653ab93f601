"""
Event surface for whatever displays the game.

Events:
- loading_change(loading: bool)
- match(title: str), once per newly matched grid cell
- win(winning_lines: set[LineId])
- article_load_failure(title: str), after the replacement is in place
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)

LOADING_CHANGE = "loading_change"
MATCH = "match"
WIN = "win"
ARTICLE_LOAD_FAILURE = "article_load_failure"

EVENT_NAMES = frozenset({LOADING_CHANGE, MATCH, WIN, ARTICLE_LOAD_FAILURE})

Handler = Callable[..., Any]


class GameEvents:
    """Subscribe/unsubscribe registry for game events."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = defaultdict(list)

    def subscribe(self, event: str, handler: Handler) -> Callable[[], None]:
        """
        Register a handler.

        Returns:
            A function that removes the handler again
        """
        if event not in EVENT_NAMES:
            raise ValueError(f"Unknown event: {event!r}")
        self._handlers[event].append(handler)
        return lambda: self.unsubscribe(event, handler)

    def unsubscribe(self, event: str, handler: Handler) -> None:
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: str, *args: Any) -> None:
        """Call every handler; a failing handler does not stop the game."""
        for handler in list(self._handlers.get(event, [])):
            try:
                handler(*args)
            except Exception:
                logger.exception(f"Error in {event} handler {handler!r}")
