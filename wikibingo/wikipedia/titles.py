"""
Title helpers: comparison keys, URLs and link classification.
"""

from __future__ import annotations

import re
from urllib.parse import quote, unquote, urljoin

from wikibingo.config import WIKIPEDIA_BASE_URL

_SEPARATOR_RUN = re.compile(r"[\s_]+")

# Pattern for article paths in Wikipedia HTML (/wiki/Title or ./Title)
ARTICLE_PATTERN = re.compile(r"^(?:/wiki/|\./)([^#?]+)")

# Namespaces that are not articles
# Note: Use spaces not underscores - titles get underscores converted to spaces
EXCLUDED_PREFIXES = (
    "Wikipedia:",
    "Help:",
    "Template:",
    "Template talk:",
    "Category:",
    "Portal:",
    "File:",
    "Image:",
    "Media:",
    "Special:",
    "Talk:",
    "User:",
    "User talk:",
    "Module:",
    "MediaWiki:",
    "Draft:",
    "MOS:",  # Manual of Style shortcuts
    "WP:",   # Wikipedia shortcuts
)


def normalize_title(title: str | None) -> str:
    """
    Build the comparison key for an article title.

    "New York", "new_york" and "  NEW   York " all give "new_york".
    Returns "" for None or empty input.
    """
    if not title:
        return ""
    return _SEPARATOR_RUN.sub("_", title).strip("_").lower()


def clean_title(title: str | None) -> str:
    """
    Tidy a title for display and fetching without changing its case.

    "  Pride_and   Prejudice " gives "Pride and Prejudice". Wikipedia
    titles are case-sensitive after the first letter, so this (not
    normalize_title) is what gets requested.
    """
    if not title:
        return ""
    return _SEPARATOR_RUN.sub(" ", title).strip()


def titles_equal(a: str | None, b: str | None) -> bool:
    return normalize_title(a) == normalize_title(b)


def title_to_url(title: str) -> str:
    """Convert article title to Wikipedia URL (first letter upper-cased)."""
    if not title:
        return WIKIPEDIA_BASE_URL
    url_title = _SEPARATOR_RUN.sub("_", title.strip())
    url_title = url_title[:1].upper() + url_title[1:]
    # Encode special chars but keep underscores and slashes (for subpages)
    return urljoin(WIKIPEDIA_BASE_URL, quote(url_title, safe="_/"))


def url_to_title(url: str) -> str | None:
    """Extract article title from a Wikipedia URL or /wiki/ path."""
    if "/wiki/" in url:
        path = url.split("/wiki/")[-1]
    elif url.startswith("./"):
        path = url[2:]
    else:
        return None
    # Remove any query parameters or anchors
    path = path.split("?")[0].split("#")[0]
    return unquote(path).replace("_", " ") or None


def is_navigable_link(href: str | None) -> bool:
    """
    Check whether an href points to an article the player may click.

    Rejects external links, citation anchors, media links and
    non-article namespaces.
    """
    if not href:
        return False
    if "://" in href or href.startswith("//") or href.startswith("mailto:"):
        return False
    if href.startswith("#") or "cite_note" in href or "cite-ref" in href:
        return False

    match = ARTICLE_PATTERN.match(href)
    if not match:
        return False

    title = unquote(match.group(1)).replace("_", " ")
    return not title.startswith(EXCLUDED_PREFIXES)


def link_to_title(href: str) -> str:
    """Extract clean article title from an article href."""
    match = ARTICLE_PATTERN.match(href)
    if match:
        return unquote(match.group(1)).replace("_", " ")
    return ""
