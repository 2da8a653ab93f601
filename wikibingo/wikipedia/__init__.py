"""
Wikipedia interaction module.

Provides title normalization, redirect resolution and article
fetching against live Wikipedia.
"""

from wikibingo.wikipedia.cache import BoundedCache
from wikibingo.wikipedia.client import WikiClient, WikiPage
from wikibingo.wikipedia.fetcher import ContentFetcher
from wikibingo.wikipedia.redirects import RedirectResolver
from wikibingo.wikipedia.titles import normalize_title, title_to_url

__all__ = [
    "BoundedCache",
    "ContentFetcher",
    "RedirectResolver",
    "WikiClient",
    "WikiPage",
    "normalize_title",
    "title_to_url",
]
