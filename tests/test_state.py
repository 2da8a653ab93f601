"""
Unit tests for GameSession, GameTimer and GameEvents.
"""

import math

import pytest

from wikibingo.game.events import GameEvents
from wikibingo.game.state import GameSession, GridCell, LineId
from wikibingo.game.timer import GameTimer, format_time


def make_grid(titles):
    return [GridCell(position=i, title=t) for i, t in enumerate(titles)]


class TestSessionValidation:
    """Test that malformed games are rejected."""

    def test_starts_at_start_title(self, session):
        """A new session shows the start article with no clicks."""
        assert session.current_article == "Fruit"
        assert session.history == ["Fruit"]
        assert session.clicks == 0
        assert session.matched_set == set()
        assert not session.game_won

    def test_wrong_cell_count(self, grid_titles):
        with pytest.raises(ValueError):
            GameSession(start_title="Fruit", grid=make_grid(grid_titles[:24]))

    def test_duplicate_titles_after_normalization(self, grid_titles):
        """'Banana' and 'banana' count as the same article."""
        grid_titles[4] = "  banana"
        with pytest.raises(ValueError):
            GameSession(start_title="Fruit", grid=make_grid(grid_titles))

    def test_empty_title(self, grid_titles):
        grid_titles[0] = " _ "
        with pytest.raises(ValueError):
            GameSession(start_title="Fruit", grid=make_grid(grid_titles))

    def test_start_title_on_grid(self, grid_titles):
        with pytest.raises(ValueError):
            GameSession(start_title="apple", grid=make_grid(grid_titles))

    def test_empty_start_title(self, grid_titles):
        with pytest.raises(ValueError):
            GameSession(start_title="", grid=make_grid(grid_titles))

    def test_positions_must_match_index(self, grid_titles):
        grid = make_grid(grid_titles)
        grid[0].position = 5
        with pytest.raises(ValueError):
            GameSession(start_title="Fruit", grid=grid)

    def test_from_titles(self, grid_titles):
        """25 grid titles followed by the start title."""
        session = GameSession.from_titles(grid_titles + ["Fruit"])
        assert session.start_title == "Fruit"
        assert session.grid[24].title == "Watermelon"
        assert session.grid[24].position == 24

    def test_from_titles_wrong_length(self, grid_titles):
        with pytest.raises(ValueError):
            GameSession.from_titles(grid_titles)


class TestSessionUpdates:
    """Test history and click bookkeeping."""

    def test_record_navigation(self, session):
        session.record_navigation("Potato")
        session.record_navigation("Carrot")
        assert session.current_article == "Carrot"
        assert session.history == ["Fruit", "Potato", "Carrot"]
        assert session.clicks == 2

    def test_no_consecutive_duplicates(self, session):
        """History never repeats the previous entry."""
        session.record_navigation("Potato")
        session.record_navigation("potato")
        assert session.history == ["Fruit", "Potato"]

    def test_clicks_keep_counting_after_win(self, session):
        """The live count goes on; the result reports the winning count."""
        session.record_navigation("Apple")
        session.game_won = True
        session.final_clicks = session.clicks
        session.record_navigation("Potato")
        assert session.current_article == "Potato"
        assert session.clicks == 2
        assert session.to_result().clicks == 1

    def test_titles_in_play(self, session):
        session.record_navigation("Potato Salad")
        in_play = session.titles_in_play()
        assert "potato_salad" in in_play
        assert "fruit" in in_play
        assert "watermelon" in in_play
        assert len(in_play) == 27

    def test_find_cell(self, session):
        assert session.find_cell("HONEYDEW").position == 7
        assert session.find_cell("Potato") is None

    def test_to_result(self, session):
        """The snapshot lists matched grid titles and winning lines."""
        session.record_navigation("Apple")
        session.grid[0].matched = True
        session.matched_set.add("apple")
        session.winning_lines.add(LineId.ROW_0)
        session.game_won = True

        result = session.to_result()
        assert result.start_title == "Fruit"
        assert result.matched_titles == ["Apple"]
        assert result.history == ["Fruit", "Apple"]
        assert result.clicks == 1
        assert result.won
        assert result.winning_lines == ["row-0"]
        assert len(result.grid_titles) == 25


class TestGameTimer:
    """Test the pausable play clock."""

    def test_not_running_until_started(self, clock):
        timer = GameTimer(clock)
        clock.advance(10)
        assert not timer.running
        assert timer.elapsed_seconds == 0

    def test_pause_excludes_loading_time(self, clock):
        """Time spent paused does not count."""
        timer = GameTimer(clock)
        timer.start()
        clock.advance(5)
        timer.pause()
        clock.advance(100)
        timer.start()
        clock.advance(2.5)
        assert timer.elapsed_seconds == 7

    def test_stop_is_final(self, clock):
        timer = GameTimer(clock)
        timer.start()
        clock.advance(3)
        timer.stop()
        timer.start()
        clock.advance(50)
        assert timer.stopped
        assert not timer.running
        assert timer.elapsed_seconds == 3

    def test_start_twice_keeps_origin(self, clock):
        timer = GameTimer(clock)
        timer.start()
        clock.advance(4)
        timer.start()
        clock.advance(4)
        assert timer.elapsed_seconds == 8

    @pytest.mark.parametrize(
        "seconds,expected",
        [
            (0, "00:00:00"),
            (59.9, "00:00:59"),
            (61, "00:01:01"),
            (3600 + 23 * 60 + 45, "01:23:45"),
            (-5, "00:00:00"),
            (math.nan, "00:00:00"),
        ],
    )
    def test_format_time(self, seconds, expected):
        assert format_time(seconds) == expected


class TestGameEvents:
    """Test the subscribe/unsubscribe surface."""

    def test_subscribe_and_emit(self):
        events = GameEvents()
        seen = []
        events.subscribe("match", seen.append)
        events.emit("match", "Apple")
        assert seen == ["Apple"]

    def test_unsubscribe_callable(self):
        events = GameEvents()
        seen = []
        unsubscribe = events.subscribe("win", seen.append)
        unsubscribe()
        events.emit("win", {LineId.ROW_0})
        assert seen == []

    def test_unknown_event(self):
        with pytest.raises(ValueError):
            GameEvents().subscribe("clicked", print)

    def test_failing_handler_does_not_stop_others(self):
        """One broken subscriber must not break the game."""
        events = GameEvents()
        seen = []

        def broken(_):
            raise RuntimeError("display crashed")

        events.subscribe("loading_change", broken)
        events.subscribe("loading_change", seen.append)
        events.emit("loading_change", True)
        assert seen == [True]
