"""Leaderboard pipeline: cache lookup, upstream fetch and cache write."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

import logging
import time

import requests

from .cache import ScorerCache
from .config import DEFAULT_NUM_PLAYERS
from .fetch import AUTO, RateLimiter, fetch_with_source, validate_options
from .formatting import RankedEntry, export_filename, results_title
from .season import SeasonQuery

CACHE_SOURCE = "cache"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeaderboardRequest:
    """What the caller asked for; ``year`` is validated by the pipeline."""

    year: Any
    num_players: int = DEFAULT_NUM_PLAYERS
    source: str = AUTO
    refresh: bool = False


@dataclass(frozen=True)
class LeaderboardResult:
    query: SeasonQuery
    num_players: int
    source: str
    entries: List[RankedEntry] = field(default_factory=list)

    @property
    def title(self) -> str:
        shown = min(self.num_players, len(self.entries)) if self.entries else self.num_players
        return results_title(self.query.label, shown)

    @property
    def filename(self) -> str:
        return export_filename(self.query.label)

    @property
    def from_cache(self) -> bool:
        return self.source == CACHE_SOURCE


def get_leaderboard(
    request: LeaderboardRequest,
    *,
    cache: Optional[ScorerCache] = None,
    session: Optional[requests.Session] = None,
    rate_limiter: Optional[RateLimiter] = None,
    sleep: Callable[[float], None] = time.sleep,
    today_year: Optional[int] = None,
) -> LeaderboardResult:
    """Return the ranked leaderboard for a season.

    A cached record is served when present (truncated to the requested
    number of players) unless ``request.refresh`` is set. Otherwise the
    upstream sources are queried and the ranked result replaces the cached
    record. Nothing is cached when fetching fails.

    Raises:
        InvalidInput: before any cache or network access
        UpstreamError, NoDataError, UnknownSchema: from the last source tried
    """
    query = SeasonQuery.from_value(request.year, today_year=today_year)
    validate_options(request.num_players, request.source)
    if cache is None:
        cache = ScorerCache()

    if not request.refresh:
        cached = cache.get(query.end_year)
        if cached is not None:
            return LeaderboardResult(
                query=query,
                num_players=request.num_players,
                source=CACHE_SOURCE,
                entries=cached[: request.num_players],
            )

    outcome = fetch_with_source(
        query.end_year,
        request.num_players,
        source=request.source,
        session=session,
        rate_limiter=rate_limiter,
        sleep=sleep,
        today_year=today_year,
    )
    cache.put(query.end_year, outcome.entries)
    logger.info(f"{len(outcome.entries)} entries for {query.label} from {outcome.source}")

    return LeaderboardResult(
        query=query,
        num_players=request.num_players,
        source=outcome.source,
        entries=outcome.entries,
    )


def clear_cached(cache: ScorerCache, end_year: Optional[int] = None) -> List[int]:
    """Clear one season (or all seasons); returns the years actually removed."""
    return cache.clear(end_year)


__all__ = [
    "LeaderboardRequest",
    "LeaderboardResult",
    "get_leaderboard",
    "clear_cached",
    "CACHE_SOURCE",
]
