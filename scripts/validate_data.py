#!/usr/bin/env python3
"""
Validate the curated article pool and game files.

Usage:
    python scripts/validate_data.py
    python scripts/validate_data.py --game games/sample.json
    python scripts/validate_data.py --game games/sample.json --online
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Fix Windows console encoding for Unicode output
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from wikibingo.config import CURATED_ARTICLES_PATH, get_missing_data_files  # noqa: E402 - must be after sys.path modification
from wikibingo.data import CuratedPool  # noqa: E402
from wikibingo.game import GameSession  # noqa: E402
from wikibingo.wikipedia import RedirectResolver, WikiClient  # noqa: E402
from wikibingo.wikipedia.errors import ReplacementError  # noqa: E402
from wikibingo.wikipedia.titles import normalize_title  # noqa: E402

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
)
logger = logging.getLogger(__name__)


def check_data_files_exist() -> bool:
    """Check that the curated pool exists."""
    print("\n=== Checking Data Files ===\n")

    missing = get_missing_data_files()
    if missing:
        for name in missing:
            print(f"✗ {name}: NOT FOUND")
        return False

    size_kb = CURATED_ARTICLES_PATH.stat().st_size / 1024
    print(f"✓ {CURATED_ARTICLES_PATH.name}: {size_kb:,.1f} KB")
    return True


def check_pool(path: Path) -> bool:
    """Load the curated pool and make sure it can hand out titles."""
    print("\n=== Curated Pool ===\n")

    pool = CuratedPool(path)
    count = pool.title_count()
    print(f"  Distinct titles: {count:,}")
    if count == 0:
        print("  ✗ Pool is empty")
        return False

    try:
        title = pool.get_replacement_title(set())
    except ReplacementError as e:
        print(f"  ✗ Could not draw a title: {e}")
        return False
    print(f"  ✓ Sample replacement: {title}")
    return True


def check_game(path: Path) -> GameSession | None:
    """Check a game file builds a valid session."""
    print(f"\n=== Game: {path} ===\n")

    with open(path, encoding="utf-8") as f:
        payload = json.load(f)
    titles = payload.get("titles", []) if isinstance(payload, dict) else payload

    try:
        session = GameSession.from_titles([str(t) for t in titles])
    except ValueError as e:
        print(f"  ✗ {e}")
        return None

    print(f"  ✓ Start: {session.start_title}")
    print(f"  ✓ Grid: {len(session.grid)} distinct titles")
    return session


async def check_redirects(session: GameSession) -> bool:
    """Report grid titles that are redirects or collide after resolution."""
    print("\n=== Redirects (online) ===\n")

    resolver = RedirectResolver(WikiClient())
    titles = session.grid_titles() + [session.start_title]
    canonical = await resolver.resolve_many(titles)

    seen: dict[str, str] = {}
    all_passed = True
    for title, target in zip(titles, canonical):
        if normalize_title(title) != normalize_title(target):
            print(f"  ⚠ {title} -> {target}")
        key = normalize_title(target)
        if key in seen:
            print(f"  ✗ {title} and {seen[key]} are the same article ({target})")
            all_passed = False
        seen[key] = title

    if all_passed:
        print("  ✓ No two titles resolve to the same article")
    return all_passed


def main() -> int:
    """Main validation routine."""
    parser = argparse.ArgumentParser(description="Validate Wikipedia Bingo data")
    parser.add_argument("--pool", type=Path, default=CURATED_ARTICLES_PATH)
    parser.add_argument("--game", type=Path, action="append", default=[])
    parser.add_argument("--online", action="store_true", help="Resolve game titles against Wikipedia")
    args = parser.parse_args()

    print("=" * 60)
    print("Wikipedia Bingo Data Validation")
    print("=" * 60)

    if args.pool == CURATED_ARTICLES_PATH and not check_data_files_exist():
        print("\n✗ Curated articles are missing. Cannot continue.")
        return 1

    try:
        if not check_pool(args.pool):
            print("\n✗ Curated pool checks failed.")
            return 1
    except (OSError, ValueError) as e:
        print(f"\n✗ Error loading curated pool: {e}")
        return 1

    for game_path in args.game:
        try:
            session = check_game(game_path)
        except (OSError, ValueError) as e:
            print(f"\n✗ Error reading game file: {e}")
            return 1
        if session is None:
            return 1
        if args.online and not asyncio.run(check_redirects(session)):
            return 1

    print("\n" + "=" * 60)
    print("✓ All validation checks passed!")
    print("=" * 60)

    return 0


if __name__ == "__main__":
    sys.exit(main())
