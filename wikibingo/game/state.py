"""
Game state dataclasses for tracking Wikipedia Bingo progress.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from wikibingo.config import GRID_CELL_COUNT, STARTING_POOL_SIZE
from wikibingo.game.timer import GameTimer
from wikibingo.wikipedia.titles import normalize_title


class LineId(Enum):
    """The 12 lines of a 5x5 board that can win: 5 rows, 5 columns, 2 diagonals."""

    ROW_0 = "row-0"
    ROW_1 = "row-1"
    ROW_2 = "row-2"
    ROW_3 = "row-3"
    ROW_4 = "row-4"
    COL_0 = "col-0"
    COL_1 = "col-1"
    COL_2 = "col-2"
    COL_3 = "col-3"
    COL_4 = "col-4"
    DIAG_MAIN = "diag-main"  # top-left to bottom-right
    DIAG_ANTI = "diag-anti"  # top-right to bottom-left

    @property
    def indices(self) -> tuple[int, ...]:
        return WIN_LINES[self]


WIN_LINES: dict[LineId, tuple[int, ...]] = {
    # rows
    LineId.ROW_0: (0, 1, 2, 3, 4),
    LineId.ROW_1: (5, 6, 7, 8, 9),
    LineId.ROW_2: (10, 11, 12, 13, 14),
    LineId.ROW_3: (15, 16, 17, 18, 19),
    LineId.ROW_4: (20, 21, 22, 23, 24),
    # columns
    LineId.COL_0: (0, 5, 10, 15, 20),
    LineId.COL_1: (1, 6, 11, 16, 21),
    LineId.COL_2: (2, 7, 12, 17, 22),
    LineId.COL_3: (3, 8, 13, 18, 23),
    LineId.COL_4: (4, 9, 14, 19, 24),
    # diagonals
    LineId.DIAG_MAIN: (0, 6, 12, 18, 24),
    LineId.DIAG_ANTI: (4, 8, 12, 16, 20),
}


@dataclass
class GridCell:
    """
    One target square on the board.

    Attributes:
        position: Board index 0-24, row-major
        title: Article title to visit
        matched: Whether the player has visited it
        canonical_title: Redirect-resolved title, filled in once when
            first needed for matching
    """

    position: int
    title: str
    matched: bool = False
    canonical_title: str | None = None

    @property
    def key(self) -> str:
        return normalize_title(self.title)


@dataclass
class GameResult:
    """
    Snapshot of a session for leaderboards and replays.

    Attributes:
        start_title: Starting article
        grid_titles: The 25 grid titles in board order
        matched_titles: Grid titles the player visited
        history: Articles visited in order (including start)
        clicks: Clicks it took to win, or all clicks if not won
        elapsed_seconds: Play time
        won: Whether a line was completed
        winning_lines: Completed lines
        timestamp: When the snapshot was taken
    """

    start_title: str
    grid_titles: list[str]
    matched_titles: list[str]
    history: list[str]
    clicks: int
    elapsed_seconds: int
    won: bool
    winning_lines: list[str]
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class GameSession:
    """
    Mutable state of one game.

    Created when a game starts and thrown away when a new one begins.
    Only the navigation core (controller, match engine, win detector and
    replacer) writes to it.

    Attributes:
        start_title: Starting article (not part of the grid)
        grid: The 25 board cells
        current_article: Article currently shown
        history: Visited articles in order, no consecutive duplicates
        clicks: Counted navigations (keeps counting after a win)
        final_clicks: Clicks at the moment the game was won
        matched_set: Normalized titles of matched grid articles (only grows)
        winning_lines: Completed lines
        game_won: Set once the first line completes
        navigation_locked: True while a navigation is in flight
        article_loading: True while article content is being fetched
        timer: Play clock
    """

    start_title: str
    grid: list[GridCell]
    current_article: str = ""
    history: list[str] = field(default_factory=list)
    clicks: int = 0
    final_clicks: int | None = None
    matched_set: set[str] = field(default_factory=set)
    winning_lines: set[LineId] = field(default_factory=set)
    game_won: bool = False
    navigation_locked: bool = False
    article_loading: bool = False
    timer: GameTimer = field(default_factory=GameTimer)

    def __post_init__(self) -> None:
        if len(self.grid) != GRID_CELL_COUNT:
            raise ValueError(f"Grid needs {GRID_CELL_COUNT} cells, got {len(self.grid)}")

        keys = [cell.key for cell in self.grid]
        if not all(keys):
            raise ValueError("Grid titles must not be empty")
        if len(set(keys)) != len(keys):
            raise ValueError("Grid titles must be distinct")
        if not normalize_title(self.start_title):
            raise ValueError("Starting title must not be empty")
        if normalize_title(self.start_title) in keys:
            raise ValueError(f"Starting title '{self.start_title}' is also on the grid")

        for position, cell in enumerate(self.grid):
            if cell.position != position:
                raise ValueError(f"Cell at index {position} claims position {cell.position}")

        if not self.current_article:
            self.current_article = self.start_title
        if not self.history:
            self.history = [self.start_title]

    @classmethod
    def from_titles(cls, titles: list[str], timer: GameTimer | None = None) -> GameSession:
        """
        Build a session from 26 titles: 25 grid titles then the start title.

        This is the shape stored for shareable/replayable games.
        """
        if len(titles) != STARTING_POOL_SIZE:
            raise ValueError(f"Expected {STARTING_POOL_SIZE} titles, got {len(titles)}")
        grid = [GridCell(position=i, title=t) for i, t in enumerate(titles[:GRID_CELL_COUNT])]
        return cls(
            start_title=titles[GRID_CELL_COUNT],
            grid=grid,
            timer=timer or GameTimer(),
        )

    @property
    def timer_running(self) -> bool:
        return self.timer.running

    @property
    def elapsed_seconds(self) -> int:
        return self.timer.elapsed_seconds

    @property
    def last_history_title(self) -> str | None:
        return self.history[-1] if self.history else None

    def grid_titles(self) -> list[str]:
        return [cell.title for cell in self.grid]

    def titles_in_play(self) -> set[str]:
        """Normalized titles of the grid, start, current article and history."""
        titles = {cell.key for cell in self.grid}
        titles.add(normalize_title(self.start_title))
        titles.add(normalize_title(self.current_article))
        titles.update(normalize_title(t) for t in self.history)
        return titles

    def find_cell(self, title: str) -> GridCell | None:
        key = normalize_title(title)
        for cell in self.grid:
            if cell.key == key:
                return cell
        return None

    def is_cell_matched(self, position: int) -> bool:
        return self.grid[position].key in self.matched_set

    def record_navigation(self, title: str) -> None:
        """Make title the current article and count a click."""
        self.current_article = title
        if normalize_title(self.last_history_title) != normalize_title(title):
            self.history.append(title)
        self.clicks += 1

    def replace_current_article(self, title: str) -> None:
        """Swap the shown article in place, without charging a click."""
        self.current_article = title
        if len(self.history) <= 1:
            # The starting article itself failed
            self.start_title = title
            self.history = [title]
        else:
            self.history[-1] = title

    def to_result(self) -> GameResult:
        """Convert to a GameResult snapshot."""
        return GameResult(
            start_title=self.start_title,
            grid_titles=self.grid_titles(),
            matched_titles=[cell.title for cell in self.grid if cell.matched],
            history=list(self.history),
            clicks=self.clicks if self.final_clicks is None else self.final_clicks,
            elapsed_seconds=self.elapsed_seconds,
            won=self.game_won,
            winning_lines=sorted(line.value for line in self.winning_lines),
            timestamp=datetime.now(),
        )
