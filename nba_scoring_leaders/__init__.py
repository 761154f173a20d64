"""nba_scoring_leaders package.

Season scoring leaders from balldontlie with a stats.nba.com fallback,
cached on disk per season.
"""

from .cache import ScorerCache
from .exceptions import (
    InvalidInput,
    NoDataError,
    ScoringLeadersError,
    UnknownSchema,
    UpstreamError,
)
from .fetch import fetch_top_scorers, fetch_with_source
from .formatting import RankedEntry, format_results_table
from .pipeline import LeaderboardRequest, LeaderboardResult, get_leaderboard
from .ranking import rank_players
from .season import SeasonQuery, season_label, validate_year

__all__ = [
    "ScorerCache",
    "InvalidInput",
    "NoDataError",
    "ScoringLeadersError",
    "UnknownSchema",
    "UpstreamError",
    "fetch_top_scorers",
    "fetch_with_source",
    "RankedEntry",
    "format_results_table",
    "LeaderboardRequest",
    "LeaderboardResult",
    "get_leaderboard",
    "rank_players",
    "SeasonQuery",
    "season_label",
    "validate_year",
]
