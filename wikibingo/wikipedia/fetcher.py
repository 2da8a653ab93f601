"""
Article fetching with retries and endpoint fallback.

Fetch order:
1. Mobile HTML endpoint (lightweight, preferred)
2. Desktop HTML endpoint (full, fallback)

Each endpoint gets up to three attempts. Only transient failures
(network errors and 5xx responses) are retried; a 4xx ends that
endpoint straight away.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Sequence

from wikibingo.config import FETCH_RETRY_DELAYS, MAX_ARTICLE_CACHE_SIZE
from wikibingo.wikipedia.cache import BoundedCache
from wikibingo.wikipedia.client import WikiClient, WikiPage
from wikibingo.wikipedia.errors import (
    ArticleUnavailableError,
    StaleRequestError,
    WikiError,
    is_transient,
)

logger = logging.getLogger(__name__)


class ContentFetcher:
    """
    Loads article content for the game, caching successful results.

    A fetch either returns a WikiPage or raises ArticleUnavailableError
    once both endpoints have used their attempt budget (at most six
    requests in total).
    """

    def __init__(
        self,
        client: WikiClient,
        cache: BoundedCache[WikiPage] | None = None,
        retry_delays: Sequence[float] = FETCH_RETRY_DELAYS,
    ) -> None:
        """
        Initialize the fetcher.

        Args:
            client: Anything with blocking get_mobile_html/get_html methods
            cache: Article cache (a fresh 100-entry cache if omitted)
            retry_delays: Seconds to wait before each attempt at one endpoint
        """
        if not retry_delays:
            raise ValueError("retry_delays needs at least one entry")
        self._client = client
        self._cache = cache if cache is not None else BoundedCache(
            MAX_ARTICLE_CACHE_SIZE, name="articles"
        )
        self._retry_delays = tuple(retry_delays)

    @property
    def cache(self) -> BoundedCache[WikiPage]:
        return self._cache

    def _endpoints(self) -> list[tuple[str, Callable[[str], WikiPage]]]:
        return [
            ("mobile", self._client.get_mobile_html),
            ("desktop", self._client.get_html),
        ]

    async def _fetch_from_endpoint(
        self,
        name: str,
        fetch: Callable[[str], WikiPage],
        title: str,
        still_wanted: Callable[[], bool] | None,
    ) -> WikiPage:
        """Try one endpoint with the retry schedule; raise the last error."""
        attempts = len(self._retry_delays)

        for attempt, delay in enumerate(self._retry_delays, start=1):
            if delay > 0:
                await asyncio.sleep(delay)
            if attempt > 1 and still_wanted is not None and not still_wanted():
                raise StaleRequestError(f"Dropped retry for '{title}', no longer wanted")

            try:
                return await asyncio.to_thread(fetch, title)
            except WikiError as e:
                if not is_transient(e) or attempt == attempts:
                    logger.debug(f"{name} gave up on '{title}' after attempt {attempt}: {e}")
                    raise
                logger.warning(f"Retry attempt {attempt}/{attempts} for '{title}' ({name}): {e}")

        raise StaleRequestError(f"No attempts made for '{title}'")

    async def fetch_article(
        self,
        title: str,
        still_wanted: Callable[[], bool] | None = None,
    ) -> WikiPage:
        """
        Fetch an article, trying the lightweight endpoint first.

        Args:
            title: Article title to fetch
            still_wanted: Checked before every retry; returning False
                abandons the fetch

        Returns:
            The parsed article

        Raises:
            ArticleUnavailableError: Both endpoints exhausted
            StaleRequestError: The caller stopped wanting this article
        """
        cached = self._cache.get(title)
        if cached is not None:
            return cached

        last_error: Exception | None = None
        for index, (name, fetch) in enumerate(self._endpoints()):
            if index > 0 and still_wanted is not None and not still_wanted():
                raise StaleRequestError(f"Dropped fallback for '{title}', no longer wanted")
            try:
                page = await self._fetch_from_endpoint(name, fetch, title, still_wanted)
            except StaleRequestError:
                raise
            except WikiError as e:
                last_error = e
                logger.info(f"{name} endpoint failed for '{title}': {e}")
                continue

            self._cache.put(title, page)
            return page

        logger.warning(f"All endpoints failed for '{title}'")
        raise ArticleUnavailableError(title, last_error)

    def clear(self) -> None:
        self._cache.clear()
