"""
Wikipedia Bingo navigation core.

Follow links through live Wikipedia articles to visit the 25 titles of a
5x5 bingo grid. Handles redirects, retries, matching and win detection.
"""

__version__ = "0.1.0"
