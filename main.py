#!/usr/bin/env python3
"""Command-line interface for the NBA scoring leaders lookup.

Fetches (or loads from cache) the top scorers of a season, prints the
ranked table and optionally writes it to CSV. The cache can be cleared for
one season or for all seasons.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Optional

from nba_scoring_leaders.cache import ScorerCache
from nba_scoring_leaders.config import API_DELAY, CACHE_DIR, DEFAULT_NUM_PLAYERS
from nba_scoring_leaders.exceptions import InvalidInput, ScoringLeadersError
from nba_scoring_leaders.export import plot_frame, write_csv
from nba_scoring_leaders.fetch import SOURCES, RateLimiter
from nba_scoring_leaders.formatting import entries_to_frame
from nba_scoring_leaders.pipeline import (
    LeaderboardRequest,
    clear_cached,
    get_leaderboard,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

CLEAR_ALL = "all"


def parse_clear_target(value: str) -> Optional[int]:
    """Map the --clear-cache argument to a year, or None for all seasons."""
    if value == CLEAR_ALL:
        return None
    try:
        return int(value)
    except ValueError as e:
        raise ValueError(
            f"Invalid --clear-cache value '{value}'. Use a year or '{CLEAR_ALL}'."
        ) from e


def run_clear(args: Any, cache: ScorerCache, parser: argparse.ArgumentParser) -> None:
    try:
        year = parse_clear_target(args.clear_cache)
    except ValueError as e:
        parser.error(str(e))

    cleared = clear_cached(cache, year)
    if year is None:
        if cleared:
            print(f"Cleared all cached data ({', '.join(map(str, cleared))})")
        else:
            print("Nothing to clear: cache is empty")
    elif cleared:
        print(f"Cleared cached data for year {year}")
    else:
        print(f"Nothing to clear: no cached data found for year {year}")


def run_lookup(args: Any, cache: ScorerCache, parser: argparse.ArgumentParser) -> None:
    request = LeaderboardRequest(
        year=args.year,
        num_players=args.num_players,
        source=args.source,
        refresh=args.refresh,
    )

    try:
        result = get_leaderboard(
            request,
            cache=cache,
            rate_limiter=RateLimiter(base_delay=args.delay),
        )
    except InvalidInput as e:
        parser.error(str(e))
    except ScoringLeadersError as e:
        logger.error(f"Error retrieving data: {e}")
        raise SystemExit(1) from e

    logger.info(f"Source: {result.source}")
    print(result.title)
    print(entries_to_frame(result.entries).to_string(index=False))

    if args.plot_data:
        print()
        print(plot_frame(result.entries).to_string(index=False))

    if args.csv is not None:
        target = Path(args.csv) if args.csv else Path(result.filename)
        write_csv(result.entries, target)
        logger.info(f"✅ Wrote {len(result.entries)} rows to {target}")


def main() -> None:
    """Main entry point with command-line interface."""
    parser = argparse.ArgumentParser(
        description="Top NBA scorers (points per game) for a season",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Top 25 scorers of the 2022-23 season
  python main.py --year 2023

  # Top 10, straight from stats.nba.com, ignoring any cached record
  python main.py --year 2023 --num-players 10 --source nba_stats --refresh

  # Save the table as NBA_Top_Scorers_2022-23.csv
  python main.py --year 2023 --csv

  # Clear one season or the whole cache
  python main.py --clear-cache 2023
  python main.py --clear-cache
        """,
    )

    parser.add_argument(
        "--cache-dir",
        type=str,
        default=str(CACHE_DIR),
        help=f"Directory holding cached season records (default: {CACHE_DIR})",
    )
    parser.add_argument(
        "--num-players",
        type=int,
        default=DEFAULT_NUM_PLAYERS,
        help=f"Number of players to rank (default: {DEFAULT_NUM_PLAYERS})",
    )
    parser.add_argument(
        "--source",
        choices=SOURCES,
        default="auto",
        help="Upstream source: 'auto' tries balldontlie then stats.nba.com (default: auto)",
    )
    parser.add_argument(
        "--refresh",
        action="store_true",
        help="Ignore the cached record and fetch again",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=API_DELAY,
        help=f"Delay between per-player API calls in seconds (default: {API_DELAY}, min: 0.05, max: 2.0)",
    )
    parser.add_argument(
        "--csv",
        nargs="?",
        const="",
        default=None,
        help="Write the table to CSV (default file name: NBA_Top_Scorers_<season>.csv)",
    )
    parser.add_argument(
        "--plot-data",
        action="store_true",
        help="Also print the bar chart projection (player, PPG, hover text)",
    )

    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "--year",
        type=str,
        help="Season end year, e.g. 2023 for the 2022-23 season",
    )
    group.add_argument(
        "--clear-cache",
        nargs="?",
        const=CLEAR_ALL,
        help="Clear cached data for a year, or for all years when no year is given",
    )

    args = parser.parse_args()
    cache = ScorerCache(Path(args.cache_dir))

    if args.clear_cache is not None:
        run_clear(args, cache, parser)
    else:
        run_lookup(args, cache, parser)


if __name__ == "__main__":
    main()
