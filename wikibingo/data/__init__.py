"""
Data access module.

Provides the curated article pool used for replacement titles.
"""

from wikibingo.data.pool import CuratedPool, ReplacementSource

__all__ = [
    "CuratedPool",
    "ReplacementSource",
]
