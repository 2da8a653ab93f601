"""
Redirect resolution with a bounded per-session cache.

A title such as "Banana fruit" may redirect to "Banana"; matching has to
compare the destination, not the link text.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from wikibingo.config import MAX_REDIRECT_CACHE_SIZE, REDIRECT_TIMEOUT
from wikibingo.wikipedia.cache import BoundedCache
from wikibingo.wikipedia.client import WikiClient
from wikibingo.wikipedia.errors import ResolveTimeoutError, WikiError
from wikibingo.wikipedia.titles import clean_title, normalize_title

logger = logging.getLogger(__name__)


class RedirectResolver:
    """
    Resolves titles to their canonical (redirect-followed) form.

    Lookups never raise: on timeout or any lookup error the input title
    (case kept) is returned and cached, so a failing title is not
    queried again during the session.
    """

    def __init__(
        self,
        client: WikiClient,
        cache: BoundedCache[str] | None = None,
        timeout: float = REDIRECT_TIMEOUT,
    ) -> None:
        """
        Initialize the resolver.

        Args:
            client: Anything with a blocking query_redirect(title) method
            cache: Redirect cache (a fresh 200-entry cache if omitted)
            timeout: Seconds before a lookup is abandoned
        """
        self._client = client
        self._cache = cache if cache is not None else BoundedCache(
            MAX_REDIRECT_CACHE_SIZE, name="redirects"
        )
        self._timeout = timeout

    @property
    def cache(self) -> BoundedCache[str]:
        return self._cache

    async def _lookup(self, title: str) -> str:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self._client.query_redirect, title),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            raise ResolveTimeoutError(
                f"Resolving '{title}' took longer than {self._timeout}s"
            ) from e

    async def resolve(self, title: str) -> str:
        """
        Return the canonical title for a (possibly redirecting) title.

        Args:
            title: Raw article title

        Returns:
            Canonical title with Wikipedia's capitalization, or the input
            title (tidied, case kept) if it could not be resolved
        """
        key = normalize_title(title)
        if not key:
            return key

        cached = self._cache.get(title)
        if cached is not None:
            return cached

        try:
            resolved = await self._lookup(title)
        except WikiError as e:
            resolved = clean_title(title)
            logger.warning(f"Could not resolve redirect for '{title}', using '{resolved}': {e}")
        else:
            if normalize_title(resolved) != key:
                logger.debug(f"Redirect: '{title}' -> '{resolved}'")

        self._cache.put(title, resolved)
        return resolved

    async def resolve_many(self, titles: Iterable[str]) -> list[str]:
        """Resolve several titles concurrently, preserving order."""
        return list(await asyncio.gather(*(self.resolve(t) for t in titles)))

    def clear(self) -> None:
        self._cache.clear()
