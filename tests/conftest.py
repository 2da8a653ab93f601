"""
Pytest configuration and shared fixtures.

This file is automatically loaded by pytest and provides
fixtures available to all test files. Nothing here touches the network:
FakeWikiClient stands in for WikiClient.
"""

from __future__ import annotations

import threading
import time
from pathlib import Path

import pytest

from wikibingo.game.events import GameEvents
from wikibingo.game.replacer import ArticleReplacer
from wikibingo.game.state import GameSession, GridCell
from wikibingo.game.timer import GameTimer
from wikibingo.wikipedia.client import WikiPage
from wikibingo.wikipedia.errors import NotFoundError, ReplacementError
from wikibingo.wikipedia.fetcher import ContentFetcher
from wikibingo.wikipedia.redirects import RedirectResolver
from wikibingo.wikipedia.titles import normalize_title, title_to_url

GRID_TITLES = [
    "Apple", "Banana", "Cherry", "Date", "Elderberry",
    "Fig", "Grape", "Honeydew", "Kiwi", "Lemon",
    "Lime", "Mango", "Nectarine", "Orange", "Papaya",
    "Peach", "Pear", "Pineapple", "Plum", "Pomegranate",
    "Quince", "Raspberry", "Strawberry", "Tangerine", "Watermelon",
]
START_TITLE = "Fruit"


class FakeWikiClient:
    """
    In-memory stand-in for WikiClient.

    Attributes:
        redirects: normalized title -> canonical title
        always_fail: normalized title -> error raised by both endpoints
        scripted: (endpoint, normalized title) -> errors raised in order
            before the endpoint succeeds
        redirect_errors: normalized title -> error raised by query_redirect
        redirect_delay: seconds query_redirect blocks for
        existing: when set, only these exact (case-sensitive) titles load;
            anything else is a 404 like on Wikipedia
        calls: (endpoint, title) for every request made
    """

    def __init__(self) -> None:
        self.redirects: dict[str, str] = {}
        self.always_fail: dict[str, Exception] = {}
        self.scripted: dict[tuple[str, str], list[Exception]] = {}
        self.redirect_errors: dict[str, Exception] = {}
        self.redirect_delay = 0.0
        self.existing: set[str] | None = None
        self.calls: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def _record(self, endpoint: str, title: str) -> None:
        with self._lock:
            self.calls.append((endpoint, title))

    def calls_to(self, endpoint: str) -> list[str]:
        return [title for name, title in self.calls if name == endpoint]

    def _page(self, endpoint: str, title: str) -> WikiPage:
        self._record(endpoint, title)
        key = normalize_title(title)
        if key in self.always_fail:
            raise self.always_fail[key]
        if self.existing is not None and title not in self.existing:
            raise NotFoundError()
        pending = self.scripted.get((endpoint, key))
        if pending:
            raise pending.pop(0)
        return WikiPage(
            title=title,
            url=title_to_url(title),
            html=f"<p>{title}</p>",
            links=["Apple", "Banana"],
            source=endpoint,
        )

    def get_mobile_html(self, title: str) -> WikiPage:
        return self._page("mobile", title)

    def get_html(self, title: str) -> WikiPage:
        return self._page("desktop", title)

    def query_redirect(self, title: str) -> str:
        self._record("redirect", title)
        if self.redirect_delay:
            time.sleep(self.redirect_delay)
        key = normalize_title(title)
        if key in self.redirect_errors:
            raise self.redirect_errors[key]
        return self.redirects.get(key, title)


class FakePool:
    """Replacement source that hands out titles in order."""

    def __init__(self, titles: list[str]) -> None:
        self.titles = list(titles)
        self.requests: list[set[str]] = []

    def get_replacement_title(self, exclude) -> str:
        excluded = {normalize_title(t) for t in exclude}
        self.requests.append(excluded)
        for title in self.titles:
            if normalize_title(title) not in excluded:
                return title
        raise ReplacementError("pool exhausted")


class FakeClock:
    """Manually advanced clock for timer and debounce tests."""

    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class EventLog:
    """Collects every emitted event as (name, argument)."""

    def __init__(self, events: GameEvents) -> None:
        self.entries: list[tuple[str, object]] = []
        for name in ("loading_change", "match", "win", "article_load_failure"):
            events.subscribe(name, lambda arg, name=name: self.entries.append((name, arg)))

    def of(self, name: str) -> list[object]:
        return [arg for event, arg in self.entries if event == name]


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def grid_titles() -> list[str]:
    return list(GRID_TITLES)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session(clock: FakeClock) -> GameSession:
    """A fresh game: fruit grid, starting at 'Fruit'."""
    grid = [GridCell(position=i, title=t) for i, t in enumerate(GRID_TITLES)]
    return GameSession(start_title=START_TITLE, grid=grid, timer=GameTimer(clock))


@pytest.fixture
def client() -> FakeWikiClient:
    return FakeWikiClient()


@pytest.fixture
def pool() -> FakePool:
    return FakePool(["Apple", "Fruit", "Blueberry", "Coconut", "Durian", "Guava"])


@pytest.fixture
def events() -> GameEvents:
    return GameEvents()


@pytest.fixture
def event_log(events: GameEvents) -> EventLog:
    return EventLog(events)


@pytest.fixture
def resolver(client: FakeWikiClient) -> RedirectResolver:
    return RedirectResolver(client, timeout=1.0)


@pytest.fixture
def fetcher(client: FakeWikiClient) -> ContentFetcher:
    return ContentFetcher(client, retry_delays=(0.0, 0.0, 0.0))


@pytest.fixture
def replacer(pool: FakePool) -> ArticleReplacer:
    return ArticleReplacer(pool)
