"""
Blocking HTTP client for the Wikipedia endpoints used by the game.

Uses requests + BeautifulSoup. Every failure is translated into the
error types in wikibingo.wikipedia.errors so callers can decide what
to retry.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from urllib.parse import quote

import requests
from bs4 import BeautifulSoup

from wikibingo.config import (
    USER_AGENT,
    WIKIPEDIA_API_URL,
    WIKIPEDIA_HTML_URL,
    WIKIPEDIA_MOBILE_HTML_URL,
    WIKIPEDIA_TIMEOUT,
)
from wikibingo.wikipedia.errors import HttpError, NetworkError, NotFoundError, ParseError
from wikibingo.wikipedia.titles import is_navigable_link, link_to_title, title_to_url

logger = logging.getLogger(__name__)


@dataclass
class WikiPage:
    """
    Represents a fetched Wikipedia article.

    Attributes:
        title: The article title (from the page, or the requested title)
        url: Canonical wiki URL of the article
        html: Sanitized article HTML (scripts and styles removed)
        links: Article titles this page links to, in page order
        source: Which endpoint produced it ("mobile" or "desktop")
    """

    title: str
    url: str
    html: str
    links: list[str] = field(default_factory=list)
    source: str = ""


class WikiClient:
    """
    Talks to the Wikipedia REST and query APIs.

    Methods block; the async game code runs them in worker threads.
    """

    # Containers whose links are not part of the readable article
    SKIP_CLASSES = {
        "references",
        "reflist",
        "refbegin",
        "mw-references-wrap",
        "navbox",
        "navigation-not-searchable",
    }

    def __init__(
        self,
        timeout: float = WIKIPEDIA_TIMEOUT,
        rate_limit: float = 0.0,
        session: requests.Session | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            timeout: Per-request timeout in seconds
            rate_limit: Minimum seconds between requests
            session: Optional pre-configured requests session
        """
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": USER_AGENT})
        self._timeout = timeout
        self._rate_limit = rate_limit
        self._last_request_time: float = 0

    def _wait_for_rate_limit(self) -> None:
        """Ensure we don't exceed rate limits."""
        elapsed = time.time() - self._last_request_time
        if elapsed < self._rate_limit:
            time.sleep(self._rate_limit - elapsed)

    def _get(self, url: str, params: dict | None = None) -> requests.Response:
        """
        GET a URL, translating failures.

        Raises:
            NetworkError: No response received
            NotFoundError: HTTP 404
            HttpError: Any other non-2xx status
        """
        self._wait_for_rate_limit()
        logger.debug(f"GET {url}")

        try:
            response = self._session.get(url, params=params, timeout=self._timeout)
        except requests.RequestException as e:
            raise NetworkError(f"{url}: {e}") from e
        finally:
            self._last_request_time = time.time()

        if response.status_code == 404:
            raise NotFoundError(url)
        if not response.ok:
            raise HttpError(response.status_code, url)
        return response

    def get_mobile_html(self, title: str) -> WikiPage:
        """Fetch the lightweight mobile rendering of an article."""
        url = WIKIPEDIA_MOBILE_HTML_URL + quote(title.replace(" ", "_"), safe="")
        response = self._get(url)
        return self.parse_page(response.text, title, source="mobile")

    def get_html(self, title: str) -> WikiPage:
        """Fetch the full desktop rendering of an article."""
        url = WIKIPEDIA_HTML_URL + quote(title.replace(" ", "_"), safe="")
        response = self._get(url)
        return self.parse_page(response.text, title, source="desktop")

    def query_redirect(self, title: str) -> str:
        """
        Ask the query API where a title ends up after following redirects.

        Returns:
            Canonical title with Wikipedia's capitalization, or the input
            title when the page is missing.

        Raises:
            ParseError: If the response is not the expected JSON shape
        """
        params = {
            "action": "query",
            "redirects": 1,
            "format": "json",
            "titles": title,
        }
        response = self._get(WIKIPEDIA_API_URL, params=params)
        try:
            data = response.json()
        except ValueError as e:
            raise ParseError(f"Invalid JSON resolving '{title}'") from e
        return self.parse_redirect_response(data, title)

    @staticmethod
    def parse_redirect_response(data: object, title: str) -> str:
        """Pull the canonical title out of a query API response."""
        if not isinstance(data, dict) or not isinstance(data.get("query"), dict):
            raise ParseError(f"Unexpected redirect response for '{title}'")

        query = data["query"]
        redirects = query.get("redirects") or []
        if redirects:
            target = redirects[-1].get("to")
            if not target:
                raise ParseError(f"Redirect without target for '{title}'")
            return target

        pages = query.get("pages") or {}
        for page_id, page in pages.items():
            if page_id != "-1" and "missing" not in page and page.get("title"):
                return page["title"]
        return title

    def parse_page(self, html: str, requested_title: str, source: str = "") -> WikiPage:
        """
        Sanitize article HTML and extract navigable links.

        Raises:
            ParseError: If the document has no usable content
        """
        if not html or not html.strip():
            raise ParseError(f"Empty document for '{requested_title}'")

        soup = BeautifulSoup(html, "lxml")

        # Non-content elements
        for elem in soup.find_all(["script", "style", "noscript"]):
            elem.decompose()

        title_elem = soup.find("title") or soup.find("h1")
        title = title_elem.get_text(strip=True) if title_elem else ""
        title = title or requested_title

        content = (
            soup.find(id="content")
            or soup.find(id="bodyContent")
            or soup.find("main")
            or soup.find("article")
            or soup.find("div", {"class": "mw-parser-output"})
            or soup.body
        )
        if content is None:
            raise ParseError(f"No content found for '{requested_title}'")

        links: list[str] = []
        seen: set[str] = set()
        for link in content.find_all("a", href=True):
            href = link.get("href", "")
            if not is_navigable_link(href):
                continue

            parent_classes: set[str] = set()
            for parent in link.parents:
                parent_classes.update(parent.get("class") or [])
            if self.SKIP_CLASSES & parent_classes:
                continue

            link_title = link_to_title(href)
            if link_title and link_title not in seen:
                links.append(link_title)
                seen.add(link_title)

        logger.debug(f"Found {len(links)} links on '{title}' ({source or 'unknown'})")
        return WikiPage(
            title=title,
            url=title_to_url(title),
            html=str(content),
            links=links,
            source=source,
        )
