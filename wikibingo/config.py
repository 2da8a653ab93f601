"""
Configuration constants for the Wikipedia Bingo project.

All paths, settings, and tunable parameters are defined here.
Values can be overridden from the environment (or a project .env file).
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# =============================================================================
# Path Configuration
# =============================================================================

# Project root is parent of wikibingo/
PROJECT_ROOT = Path(__file__).parent.parent

load_dotenv(PROJECT_ROOT / ".env")

# Data directory (contains the curated article pool)
DATA_DIR = Path(os.environ.get("WIKIBINGO_DATA_DIR", PROJECT_ROOT / "data"))

# Curated article pool used for replacement titles
CURATED_ARTICLES_PATH = Path(
    os.environ.get("WIKIBINGO_CURATED_PATH", DATA_DIR / "curatedArticles.json")
)

# =============================================================================
# Game Configuration
# =============================================================================

# Board is GRID_SIZE x GRID_SIZE
GRID_SIZE = 5
GRID_CELL_COUNT = GRID_SIZE * GRID_SIZE

# 25 grid titles + 1 starting title
STARTING_POOL_SIZE = GRID_CELL_COUNT + 1

# Repeated clicks within this window are ignored by the UI-facing debounce
CLICK_DEBOUNCE_SECONDS = 0.1

# How many replacement titles to try for one failed slot
MAX_REPLACEMENT_ATTEMPTS = 3

# =============================================================================
# Cache Configuration
# =============================================================================

MAX_REDIRECT_CACHE_SIZE = 200
MAX_ARTICLE_CACHE_SIZE = 100

# =============================================================================
# Wikipedia Configuration
# =============================================================================

WIKIPEDIA_BASE_URL = "https://en.wikipedia.org/wiki/"
WIKIPEDIA_API_URL = "https://en.wikipedia.org/w/api.php"

# Lightweight endpoint (tried first) and full endpoint (fallback)
WIKIPEDIA_MOBILE_HTML_URL = "https://en.m.wikipedia.org/api/rest_v1/page/mobile-html/"
WIKIPEDIA_HTML_URL = "https://en.wikipedia.org/api/rest_v1/page/html/"

# Per-request timeout in seconds
WIKIPEDIA_TIMEOUT = float(os.environ.get("WIKIPEDIA_TIMEOUT", "10"))

# Redirect resolution is abandoned after this many seconds
REDIRECT_TIMEOUT = float(os.environ.get("REDIRECT_TIMEOUT", "5.0"))

# Delay (seconds) before each attempt at one endpoint: 3 attempts per endpoint
FETCH_RETRY_DELAYS = (0.0, 1.0, 2.0)

# User agent for requests (be a good citizen)
USER_AGENT = "WikiBingo/0.1 (navigation core; contact via project repository)"

# =============================================================================
# Logging Configuration
# =============================================================================

# Log level (DEBUG, INFO, WARNING, ERROR)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


# =============================================================================
# Validation Helpers
# =============================================================================

def validate_data_files() -> dict[str, bool]:
    """Check which data files exist."""
    return {
        "curated_articles": CURATED_ARTICLES_PATH.exists(),
    }


def get_missing_data_files() -> list[str]:
    """Return list of missing data file names."""
    status = validate_data_files()
    return [name for name, exists in status.items() if not exists]
