"""
Game clock that pauses while articles load.
"""

from __future__ import annotations

import time
from typing import Callable


class GameTimer:
    """
    Tracks elapsed play time.

    Timer behavior:
    - Starts after the first article has loaded (not on game creation)
    - Paused while an article is loading, resumed afterwards
    - Stopped for good once the game is won
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._accumulated = 0.0
        self._started_at: float | None = None
        self._stopped = False

    @property
    def running(self) -> bool:
        return self._started_at is not None

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def elapsed_seconds(self) -> int:
        """Whole seconds of play so far."""
        elapsed = self._accumulated
        if self._started_at is not None:
            elapsed += self._clock() - self._started_at
        return int(elapsed)

    def start(self) -> None:
        """Start or resume. No effect once stopped."""
        if self._stopped or self._started_at is not None:
            return
        self._started_at = self._clock()

    def pause(self) -> None:
        if self._started_at is None:
            return
        self._accumulated += self._clock() - self._started_at
        self._started_at = None

    def stop(self) -> None:
        self.pause()
        self._stopped = True


def format_time(seconds: float) -> str:
    """Format seconds as HH:MM:SS (e.g. 01:23:45)."""
    if seconds != seconds or seconds < 0:  # NaN or negative
        return "00:00:00"
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
