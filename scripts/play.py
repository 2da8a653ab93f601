#!/usr/bin/env python3
"""
Wikipedia Bingo CLI - play a bingo board in the terminal.

Usage:
    python scripts/play.py --game games/sample.json
    python scripts/play.py --game games/sample.json --pool data/curatedArticles.json -v

The game file holds 26 titles: the 25 grid titles in board order followed by
the starting article, either as a JSON list or as {"titles": [...]}.

Commands at the prompt:
    go <title>   Navigate to an article by title or Wikipedia URL
    <number>     Follow link number N from the current article
    links        List links on the current article
    grid         Show the board
    history      Show visited articles
    quit         Stop playing
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Fix Windows console encoding
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from wikibingo.config import CURATED_ARTICLES_PATH, GRID_SIZE, LOG_LEVEL  # noqa: E402
from wikibingo.data import CuratedPool  # noqa: E402
from wikibingo.game import GameSession, NavigationController  # noqa: E402
from wikibingo.game.events import ARTICLE_LOAD_FAILURE, MATCH, WIN  # noqa: E402
from wikibingo.game.timer import format_time  # noqa: E402
from wikibingo.game.win import winning_cells  # noqa: E402
from wikibingo.wikipedia import WikiClient  # noqa: E402
from wikibingo.wikipedia.titles import url_to_title  # noqa: E402

LINKS_SHOWN = 40


def load_titles(path: Path) -> list[str]:
    """Read the 26 game titles from a JSON file."""
    with open(path, encoding="utf-8") as f:
        payload = json.load(f)
    if isinstance(payload, dict):
        payload = payload.get("titles", [])
    return [str(title) for title in payload]


def print_grid(controller: NavigationController) -> None:
    session = controller.session
    winners = set(winning_cells(session))
    width = max(len(cell.title) for cell in session.grid)
    width = min(width, 24)

    for row in range(GRID_SIZE):
        cells = []
        for cell in session.grid[row * GRID_SIZE:(row + 1) * GRID_SIZE]:
            mark = "*" if cell.position in winners else "x" if cell.matched else " "
            cells.append(f"[{mark}] {cell.title[:width]:<{width}}")
        print("  ".join(cells))


def print_status(controller: NavigationController) -> None:
    session = controller.session
    print(
        f"\n>> {session.current_article} | clicks: {session.clicks} | "
        f"time: {format_time(session.elapsed_seconds)} | "
        f"found: {len(session.matched_set)}/{len(session.grid)}"
    )


def print_links(controller: NavigationController) -> None:
    page = controller.current_page
    if page is None or not page.links:
        print("No links on this article.")
        return
    for i, link in enumerate(page.links[:LINKS_SHOWN], start=1):
        print(f"  {i:>3}. {link}")
    if len(page.links) > LINKS_SHOWN:
        print(f"  ... {len(page.links) - LINKS_SHOWN} more (use 'go <title>')")


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Play Wikipedia Bingo in the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--game",
        type=Path,
        required=True,
        help="JSON file with 25 grid titles followed by the starting title",
    )
    parser.add_argument(
        "--pool",
        type=Path,
        default=CURATED_ARTICLES_PATH,
        help=f"Curated articles JSON used for replacements (default: {CURATED_ARTICLES_PATH})",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    return parser.parse_args()


async def play(controller: NavigationController) -> None:
    """Interactive game loop."""
    events = controller.events
    events.subscribe(MATCH, lambda title: print(f"  Found '{title}'!"))
    events.subscribe(WIN, lambda lines: print(f"  BINGO! {', '.join(sorted(l.value for l in lines))}"))
    events.subscribe(ARTICLE_LOAD_FAILURE, lambda title: print(f"  '{title}' could not be loaded, replaced."))

    await controller.start()
    print_grid(controller)

    while True:
        print_status(controller)
        try:
            line = (await asyncio.to_thread(input, "> ")).strip()
        except EOFError:
            break

        if not line:
            continue
        command, _, argument = line.partition(" ")
        command = command.lower()

        if command in ("quit", "exit", "q"):
            break
        elif command == "grid":
            print_grid(controller)
        elif command == "links":
            print_links(controller)
        elif command == "history":
            for i, title in enumerate(controller.session.history):
                print(f"  {i}. {title}")
        elif command == "go" and argument:
            await controller.click(url_to_title(argument) or argument)
        elif command.isdigit():
            page = controller.current_page
            index = int(command) - 1
            if page is None or not 0 <= index < len(page.links):
                print("No such link.")
                continue
            await controller.click(page.links[index])
        else:
            print("Commands: go <title>, <number>, links, grid, history, quit")


def main() -> int:
    """Main entry point."""
    args = parse_args()

    # Set up logging
    log_level = logging.DEBUG if args.verbose else getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        session = GameSession.from_titles(load_titles(args.game))
    except (OSError, ValueError) as e:
        print(f"Error: could not load game from {args.game}: {e}", file=sys.stderr)
        return 1

    controller = NavigationController.for_session(
        session,
        client=WikiClient(),
        source=CuratedPool(args.pool),
    )

    print("\n" + "=" * 60)
    print("Wikipedia Bingo")
    print("=" * 60)
    print(f"  Start: {session.start_title}")
    print("=" * 60 + "\n")

    with controller:
        try:
            asyncio.run(play(controller))
        except KeyboardInterrupt:
            print("\n\nGame interrupted by user")
            return 130  # Standard exit code for Ctrl+C

    result = session.to_result()
    print("\n" + "=" * 60)
    if result.won:
        print(f"Bingo! {len(result.matched_titles)} articles found in {result.clicks} clicks")
    else:
        print(f"Game over. {len(result.matched_titles)} articles found")
    print("=" * 60)
    print(f"\nTotal time: {format_time(result.elapsed_seconds)}")
    print("\nPath taken:")
    for i, title in enumerate(result.history):
        marker = " (START)" if i == 0 else ""
        print(f"  {i}. {title}{marker}")

    return 0 if result.won else 1


if __name__ == "__main__":
    sys.exit(main())
