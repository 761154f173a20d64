"""Column schema for cached leaderboard records.

Each season's ranked table is stored as its own parquet file written by
DuckDB. The projection below pins the column types so a record read back
compares equal to the entries that were written.
"""

from __future__ import annotations

import re
from typing import Optional

CACHE_FILE_PREFIX = "top_scorers_"
CACHE_FILE_SUFFIX = ".parquet"

_CACHE_FILE_RE = re.compile(rf"^{CACHE_FILE_PREFIX}(\d{{4}}){re.escape(CACHE_FILE_SUFFIX)}$")


def cache_file_name(end_year: int) -> str:
    """Deterministic file name for a season, e.g. 'top_scorers_2023.parquet'."""
    return f"{CACHE_FILE_PREFIX}{end_year}{CACHE_FILE_SUFFIX}"


def year_from_file_name(name: str) -> Optional[int]:
    """Parse the season end year back out of a cache file name."""
    match = _CACHE_FILE_RE.match(name)
    return int(match.group(1)) if match else None


def record_select_sql(relation: str = "incoming") -> str:
    """Return the typed projection used when writing a record."""
    return f"""
        SELECT
            CAST("rank" AS INTEGER) AS "rank",
            CAST(player AS VARCHAR) AS player,
            CAST(team AS VARCHAR) AS team,
            CAST(ppg AS DOUBLE) AS ppg,
            CAST(games_played AS INTEGER) AS games_played,
            CAST(minutes_per_game AS DOUBLE) AS minutes_per_game
        FROM {relation}
        ORDER BY "rank"
    """


__all__ = [
    "cache_file_name",
    "year_from_file_name",
    "record_select_sql",
]
