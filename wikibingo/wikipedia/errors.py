"""
Error types for talking to Wikipedia.

Retry policy dispatches on these classes via is_transient():
network failures and 5xx responses are retried, everything else is not.
"""

from __future__ import annotations


class WikiError(Exception):
    """Base class for all content-source errors."""


class NetworkError(WikiError):
    """No response was received (connection refused, DNS, socket timeout)."""


class HttpError(WikiError):
    """The server answered with a non-success status code."""

    def __init__(self, status: int, url: str = "") -> None:
        super().__init__(f"HTTP {status} for {url}" if url else f"HTTP {status}")
        self.status = status
        self.url = url

    @property
    def is_server_error(self) -> bool:
        return self.status >= 500

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status < 500


class NotFoundError(HttpError):
    """The article does not exist (HTTP 404)."""

    def __init__(self, url: str = "") -> None:
        super().__init__(404, url)


class ResolveTimeoutError(WikiError):
    """Redirect resolution exceeded its time ceiling."""


class ParseError(WikiError):
    """The response body could not be understood."""


class ArticleUnavailableError(WikiError):
    """Every endpoint and retry for an article has been used up."""

    def __init__(self, title: str, last_error: Exception | None = None) -> None:
        super().__init__(f"Could not load '{title}': {last_error}")
        self.title = title
        self.last_error = last_error


class StaleRequestError(WikiError):
    """A scheduled retry was dropped because the player moved on."""


class ReplacementError(WikiError):
    """No valid replacement title could be obtained."""


def is_transient(error: Exception) -> bool:
    """Whether an error is worth retrying at the same endpoint."""
    if isinstance(error, NetworkError):
        return True
    if isinstance(error, HttpError):
        return error.is_server_error
    return False
