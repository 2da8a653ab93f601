"""
Navigation controller: the single entry point for moving between articles.

Every navigation goes through register_navigation(), which:
1. Drops the request if another navigation is in flight
2. Resolves redirects before anything else is shown
3. Ignores clicks on the current or previous article
4. Records the click and loads the article
5. Matches the board and checks for a win on success
6. Swaps in a replacement article on failure
7. Always releases the navigation lock
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from wikibingo.config import (
    CLICK_DEBOUNCE_SECONDS,
    MAX_ARTICLE_CACHE_SIZE,
    MAX_REDIRECT_CACHE_SIZE,
    MAX_REPLACEMENT_ATTEMPTS,
)
from wikibingo.data.pool import ReplacementSource
from wikibingo.game.events import ARTICLE_LOAD_FAILURE, LOADING_CHANGE, GameEvents
from wikibingo.game.matching import MatchEngine
from wikibingo.game.replacer import CURRENT_ARTICLE, ArticleReplacer
from wikibingo.game.state import GameSession
from wikibingo.game.win import WinDetector
from wikibingo.wikipedia.cache import BoundedCache
from wikibingo.wikipedia.client import WikiClient, WikiPage
from wikibingo.wikipedia.errors import ArticleUnavailableError, ReplacementError, StaleRequestError
from wikibingo.wikipedia.fetcher import ContentFetcher
from wikibingo.wikipedia.redirects import RedirectResolver
from wikibingo.wikipedia.titles import normalize_title, titles_equal

logger = logging.getLogger(__name__)


class NavigationController:
    """
    Drives one game session.

    States are Idle and Navigating. The lock is checked and taken before
    the first await, so under asyncio's single-threaded scheduling at
    most one navigation is ever in flight. Requests that arrive while
    navigating are dropped, not queued.
    """

    def __init__(
        self,
        session: GameSession,
        resolver: RedirectResolver,
        fetcher: ContentFetcher,
        replacer: ArticleReplacer,
        events: GameEvents | None = None,
        clock: Callable[[], float] = time.monotonic,
        debounce_seconds: float = CLICK_DEBOUNCE_SECONDS,
        max_replacements: int = MAX_REPLACEMENT_ATTEMPTS,
    ) -> None:
        """
        Initialize the controller.

        Args:
            session: Game to drive
            resolver: Redirect resolver (owns the redirect cache)
            fetcher: Content fetcher (owns the article cache)
            replacer: Replaces articles that cannot be loaded
            events: Event registry (a fresh one if omitted)
            clock: Monotonic clock used by the click debounce
            debounce_seconds: Window in which repeated clicks are ignored
            max_replacements: Replacement titles tried for one failed load
        """
        self._session = session
        self._resolver = resolver
        self._fetcher = fetcher
        self._replacer = replacer
        self._events = events or GameEvents()
        self._matcher = MatchEngine(resolver, self._events)
        self._win_detector = WinDetector(self._events)
        self._clock = clock
        self._debounce_seconds = debounce_seconds
        self._max_replacements = max_replacements

        self._navigating = False
        self._closed = False
        self._last_click_at: float | None = None
        self._current_page: WikiPage | None = None

    @classmethod
    def for_session(
        cls,
        session: GameSession,
        client: WikiClient,
        source: ReplacementSource,
        events: GameEvents | None = None,
        **kwargs,
    ) -> NavigationController:
        """Wire a controller with fresh redirect and article caches."""
        resolver = RedirectResolver(
            client, BoundedCache(MAX_REDIRECT_CACHE_SIZE, name="redirects")
        )
        fetcher = ContentFetcher(
            client, BoundedCache(MAX_ARTICLE_CACHE_SIZE, name="articles")
        )
        return cls(session, resolver, fetcher, ArticleReplacer(source), events, **kwargs)

    @property
    def session(self) -> GameSession:
        return self._session

    @property
    def events(self) -> GameEvents:
        return self._events

    @property
    def is_navigating(self) -> bool:
        return self._navigating

    @property
    def current_page(self) -> WikiPage | None:
        """Content of the article on screen, once loaded."""
        return self._current_page

    def _set_loading(self, loading: bool) -> None:
        session = self._session
        session.article_loading = loading
        if loading:
            session.timer.pause()
        elif not session.game_won:
            session.timer.start()
        self._events.emit(LOADING_CHANGE, loading)

    def _is_duplicate(self, *titles: str) -> bool:
        """Whether any of titles is the current or the previous article."""
        keys = {normalize_title(t) for t in titles}
        session = self._session
        return (
            normalize_title(session.current_article) in keys
            or normalize_title(session.last_history_title) in keys
        )

    def _still_showing(self, title: str) -> bool:
        return not self._closed and titles_equal(self._session.current_article, title)

    async def start(self) -> WikiPage | None:
        """Load the starting article and start the clock."""
        title = self._session.current_article
        logger.info(f"Starting game at '{title}'")
        self._set_loading(True)
        try:
            return await self._load_current(title, title)
        finally:
            self._set_loading(False)

    async def click(self, title: str) -> bool:
        """
        UI-facing entry point with a short debounce.

        Clicks within debounce_seconds of the previous accepted click are
        ignored. The navigation lock remains the real guarantee.
        """
        now = self._clock()
        if self._last_click_at is not None and now - self._last_click_at < self._debounce_seconds:
            logger.debug(f"Debounced click on '{title}'")
            return False
        self._last_click_at = now
        return await self.register_navigation(title)

    async def register_navigation(self, title: str) -> bool:
        """
        Navigate to an article.

        Args:
            title: Title as clicked (link text, history entry, search)

        Returns:
            True if a click was recorded, False if the request was dropped
            or was a duplicate
        """
        # Checked and set before the first await
        if self._navigating:
            logger.info(f"Navigation already in progress, ignoring '{title}'")
            return False
        self._navigating = True
        self._session.navigation_locked = True

        try:
            if self._is_duplicate(title):
                return False

            canonical = await self._resolver.resolve(title)
            if self._is_duplicate(title, canonical):
                logger.debug(f"Ignoring repeat navigation to '{canonical}'")
                return False

            session = self._session
            session.record_navigation(canonical)
            logger.info(f"Click {session.clicks}: '{title}' -> '{canonical}'")

            self._set_loading(True)
            await self._load_current(title, canonical)
            return True
        finally:
            if self._session.article_loading:
                self._set_loading(False)
            self._navigating = False
            self._session.navigation_locked = False

    async def _load_current(self, clicked: str, canonical: str) -> WikiPage | None:
        """
        Fetch the current article, replacing it if it cannot be loaded.

        Returns:
            The loaded page, or None if loading was abandoned
        """
        target = self._session.current_article
        # Titles that failed during this load; history only keeps the last one
        failed_titles: set[str] = set()

        for attempt in range(self._max_replacements + 1):
            try:
                page = await self._fetcher.fetch_article(
                    target, still_wanted=lambda t=target: self._still_showing(t)
                )
            except StaleRequestError as e:
                logger.info(str(e))
                return None
            except ArticleUnavailableError as e:
                if attempt == self._max_replacements:
                    logger.error(f"Giving up on '{target}' after {attempt} replacements: {e}")
                    return None
                failed = target
                failed_titles.add(failed)
                try:
                    target = self._replacer.replace(
                        self._session, CURRENT_ARTICLE, exclude=failed_titles
                    )
                except ReplacementError as err:
                    logger.error(f"Could not replace '{failed}': {err}")
                    return None
                self._events.emit(ARTICLE_LOAD_FAILURE, failed)
                # Continue as if the replacement had been clicked
                clicked = canonical = target
                continue

            self._current_page = page
            if await self._matcher.apply(self._session, clicked, canonical):
                self._win_detector.check(self._session)
            return page

        return None

    async def verify_grid_cell(self, position: int) -> WikiPage | None:
        """
        Load a grid cell's article (e.g. to preview it).

        An unmatched cell whose article cannot be loaded is replaced in
        place with a fresh curated title.

        Returns:
            The article, or None if it failed and was replaced
        """
        cell = self._session.grid[position]
        title = cell.title

        def still_on_grid() -> bool:
            return not self._closed and self._session.grid[position].title == title

        try:
            return await self._fetcher.fetch_article(title, still_wanted=still_on_grid)
        except StaleRequestError as e:
            logger.info(str(e))
            return None
        except ArticleUnavailableError:
            if not still_on_grid():
                return None
            if self._session.is_cell_matched(position):
                logger.warning(f"Matched cell '{title}' failed to load, keeping it")
                return None
            try:
                self._replacer.replace(self._session, position)
            except ReplacementError as e:
                logger.error(f"Could not replace grid cell '{title}': {e}")
                return None
            self._events.emit(ARTICLE_LOAD_FAILURE, title)
            return None

    def close(self) -> None:
        """Stop the game: pending retries are dropped and the clock stops."""
        self._closed = True
        self._session.timer.stop()

    def __enter__(self) -> NavigationController:
        return self

    def __exit__(self, *args) -> None:
        self.close()
