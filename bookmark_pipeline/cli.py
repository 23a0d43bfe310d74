"""
X Bookmarks CLI
===============

Usage:
    x-bookmarks auth                 # Log in to X in a browser and save the session
    x-bookmarks scrape [N]           # Scrape N bookmarks (default: 10)
    x-bookmarks scrape 20 --headless
    x-bookmarks stats [--recent N]   # Ledger statistics and most recent posts
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .browser import BrowserSession, login_interactive
from .collector import BookmarkCollector
from .config import DEFAULT_MAX_ITEMS, PipelineConfig
from .errors import PipelineError
from .ledger import Ledger
from .logger import Logger
from .models import RunReport
from .pipeline import BookmarkPipeline

COMMANDS = ("auth", "scrape", "stats")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="x-bookmarks",
        description="Save X (Twitter) bookmarks as Markdown notes",
    )
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("auth", help="Login to X and save session")

    scrape = subparsers.add_parser("scrape", help="Scrape N bookmarks")
    scrape.add_argument("count", nargs="?", type=int, default=DEFAULT_MAX_ITEMS,
                        help=f"Number of bookmarks to collect (default: {DEFAULT_MAX_ITEMS})")
    scrape.add_argument("--headless", action="store_true", help="Run Chrome without a window")
    scrape.add_argument("--output-dir", type=str, help="Markdown output directory")

    stats = subparsers.add_parser("stats", help="Show ledger statistics")
    stats.add_argument("--recent", type=int, default=10, help="Recent posts to list")

    return parser


def print_usage():
    print("Usage:")
    print("  x-bookmarks auth          - Login to X and save session")
    print("  x-bookmarks scrape [N]    - Scrape N bookmarks (default: 10)")
    print("  x-bookmarks stats         - Show what has been scraped so far")
    print("")
    print("Examples:")
    print("  x-bookmarks scrape        - Scrape 10 bookmarks")
    print("  x-bookmarks scrape 5      - Scrape 5 bookmarks")
    print("  x-bookmarks scrape 20     - Scrape 20 bookmarks")


def run_scrape(config: PipelineConfig, max_items: int) -> RunReport:
    with Ledger(config.db_path) as ledger, BrowserSession(config) as page:
        collector = BookmarkCollector(
            page,
            max_scrolls=config.max_scrolls,
            stagnation_limit=config.stagnation_limit,
            scroll_increment=config.scroll_increment,
        )
        pipeline = BookmarkPipeline(page, ledger, config.output_dir, collector=collector)
        return pipeline.run(max_items)


def print_stats(ledger: Ledger, recent: int = 10):
    stats = ledger.stats()

    Logger.banner("BOOKMARK LEDGER")
    print(f"Total scraped: {stats['total']}")
    print(f"With media:    {stats['with_media']}")

    if stats['top_authors']:
        print("\nTop authors:")
        for author in stats['top_authors']:
            print(f"   {author['author_handle']} ({author['author_name']}): {author['count']}")

    entries = ledger.recent(recent)
    if entries:
        print(f"\nMost recent {len(entries)}:")
        for entry in entries:
            print(f"   {entry.scraped_at}  {entry.author_handle}  {entry.url}")


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0] not in COMMANDS:
        print_usage()
        return 0

    args = build_parser().parse_args(argv)
    config = PipelineConfig.from_env()

    if args.command == "auth":
        try:
            return 0 if login_interactive(config) else 1
        except PipelineError as e:
            Logger.error(f"Login failed: {e}")
            return 1

    if args.command == "stats":
        try:
            with Ledger(config.db_path) as ledger:
                print_stats(ledger, args.recent)
        except (PipelineError, OSError) as e:
            Logger.error(f"Could not read ledger: {e}")
            return 1
        return 0

    if args.count <= 0:
        Logger.error("Number of bookmarks must be positive")
        return 1
    if args.headless:
        config.headless = True
    if args.output_dir:
        config.output_dir = Path(args.output_dir)

    try:
        report = run_scrape(config, args.count)
    except PipelineError as e:
        Logger.error(f"Error during scraping: {e}")
        return 1
    except OSError as e:
        Logger.error(f"Error during scraping (file system): {e}")
        return 1
    except KeyboardInterrupt:
        Logger.warning("Interrupted by user")
        return 130

    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
