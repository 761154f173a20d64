"""On-disk cache of ranked leaderboards, one parquet file per season.

Records are written with DuckDB to a temporary file that then replaces the
target, so a season's record is either complete or absent. Records are
never modified in place; a refresh overwrites the whole file.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

import logging

import duckdb

from .config import CACHE_DIR
from .formatting import RankedEntry, entries_from_frame, entries_to_frame
from .schema import cache_file_name, record_select_sql, year_from_file_name

logger = logging.getLogger(__name__)


def _sql_path(path: Path) -> str:
    return str(path).replace("'", "''")


class ScorerCache:
    """Year-keyed store of RankedEntry lists."""

    def __init__(self, cache_dir: str | Path = CACHE_DIR) -> None:
        self.cache_dir = Path(cache_dir)

    def path_for(self, end_year: int) -> Path:
        return self.cache_dir / cache_file_name(end_year)

    def get(self, end_year: int) -> Optional[List[RankedEntry]]:
        """Return the cached entries for a season, or None on a miss."""
        path = self.path_for(end_year)
        if not path.exists():
            return None

        conn = duckdb.connect()
        try:
            df = conn.read_parquet(str(path)).order('"rank"').df()
        finally:
            conn.close()
        logger.info(f"Loading cached data for season ending {end_year}")
        return entries_from_frame(df)

    def put(self, end_year: int, entries: Sequence[RankedEntry]) -> Path:
        """Store ``entries`` for a season, replacing any existing record."""
        if not entries:
            raise ValueError(f"Refusing to cache an empty record for {end_year}")

        self.cache_dir.mkdir(parents=True, exist_ok=True)
        target = self.path_for(end_year)
        tmp = target.with_suffix(target.suffix + ".tmp")

        df = entries_to_frame(entries)
        conn = duckdb.connect()
        try:
            conn.register("incoming", df)
            conn.execute(
                f"COPY ({record_select_sql('incoming')}) TO '{_sql_path(tmp)}' (FORMAT PARQUET)"
            )
            conn.unregister("incoming")
        except Exception:
            tmp.unlink(missing_ok=True)
            raise
        finally:
            conn.close()

        tmp.replace(target)
        logger.info(f"Cached {len(entries)} entries for season ending {end_year} at {target}")
        return target

    def cached_years(self) -> List[int]:
        if not self.cache_dir.is_dir():
            return []
        years = []
        for path in self.cache_dir.iterdir():
            year = year_from_file_name(path.name)
            if year is not None:
                years.append(year)
        return sorted(years)

    def clear(self, end_year: Optional[int] = None) -> List[int]:
        """Delete one season's record, or every record when ``end_year`` is None.

        Returns the years that were removed. An empty list means there was
        nothing to clear; that case is not an error.
        """
        if end_year is None:
            years = self.cached_years()
            for year in years:
                self.path_for(year).unlink(missing_ok=True)
            if years:
                logger.info(f"Cleared all cached data ({len(years)} seasons)")
            else:
                logger.info("No cached data to clear")
            return years

        path = self.path_for(end_year)
        if not path.exists():
            logger.info(f"No cached data found for year {end_year}")
            return []
        path.unlink(missing_ok=True)
        logger.info(f"Cleared cached data for year {end_year}")
        return [end_year]


__all__ = ["ScorerCache"]
