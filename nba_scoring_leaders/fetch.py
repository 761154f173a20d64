"""Fetch season scoring averages from the two upstream sources.

Primary source is balldontlie: one request for the player list, then one
season-averages request per player, paced by a fixed delay. The fallback is
stats.nba.com's league leaders endpoint, a single request (retried a few
times) that needs browser-like headers to be answered.

Only the first page of the balldontlie player list (100 players) is read.
Pagination is a known gap and is intentionally not followed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import logging
import time

import requests
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_none,
)

from .config import (
    API_DELAY,
    BALLDONTLIE_API_KEY,
    BALLDONTLIE_BASE_URL,
    DEFAULT_NUM_PLAYERS,
    FALLBACK_ATTEMPTS,
    FALLBACK_MIN_GAMES,
    NBA_STATS_URL,
    PRIMARY_MIN_GAMES,
    REQUEST_TIMEOUT,
)
from .exceptions import InvalidInput, NoDataError, ScoringLeadersError, UpstreamError
from .formatting import BALLDONTLIE, NBA_STATS, RankedEntry, format_results_table
from .ranking import rank_players
from .season import SeasonQuery


# User-Agent for balldontlie requests
USER_AGENT = "nba-scoring-leaders/0.1"

# stats.nba.com drops requests that do not look like they come from a browser
BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    ),
    "Referer": "https://www.nba.com",
    "Accept-Language": "en-US,en;q=0.9",
}

PLAYERS_PER_PAGE = 100

# API rate limiting configuration
DEFAULT_API_DELAY = API_DELAY
MIN_API_DELAY = 0.05
MAX_API_DELAY = 2.0

AUTO = "auto"
SOURCES = (AUTO, BALLDONTLIE, NBA_STATS)

logger = logging.getLogger(__name__)


class RateLimiter:
    """Fixed-delay rate limiter for sequential API calls."""

    def __init__(
        self,
        base_delay: float = DEFAULT_API_DELAY,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.base_delay = max(MIN_API_DELAY, min(base_delay, MAX_API_DELAY))
        self.last_call_time: Optional[float] = None
        self._clock = clock
        self._sleep = sleep

    def wait_if_needed(self) -> None:
        """Wait if needed to respect rate limits."""
        if self.last_call_time is not None:
            time_since_last_call = self._clock() - self.last_call_time
            if time_since_last_call < self.base_delay:
                sleep_time = self.base_delay - time_since_last_call
                logger.debug(f"Rate limiting: sleeping for {sleep_time:.3f}s")
                self._sleep(sleep_time)

        self.last_call_time = self._clock()


@dataclass(frozen=True)
class FetchOutcome:
    """Ranked entries together with the source that produced them."""

    source: str
    entries: List[RankedEntry]


def validate_options(num_players: int, source: str) -> None:
    """Reject a bad player count or source name before any I/O."""
    if num_players < 1:
        raise InvalidInput(f"Number of players must be at least 1, got {num_players}")
    if source not in SOURCES:
        raise InvalidInput(f"Unknown source '{source}'. Use one of: {', '.join(SOURCES)}")


def _primary_headers() -> Dict[str, str]:
    headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
    if BALLDONTLIE_API_KEY:
        headers["Authorization"] = BALLDONTLIE_API_KEY
    return headers


def _get_json(
    session: requests.Session,
    url: str,
    params: Dict[str, Any],
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """GET ``url`` and decode a JSON object body.

    Raises UpstreamError on transport errors, non-200 responses and bodies
    that are not a JSON object. ``status_code`` is set only for HTTP errors.
    """
    try:
        resp = session.get(url, params=params, headers=headers, timeout=REQUEST_TIMEOUT)
    except requests.exceptions.RequestException as e:
        raise UpstreamError(f"Request to {url} failed: {e}") from e

    if resp.status_code != 200:
        raise UpstreamError(
            f"API request failed with status: {resp.status_code}",
            status_code=resp.status_code,
        )

    try:
        payload = resp.json()
    except ValueError as e:
        raise UpstreamError(f"Invalid JSON returned by {url}") from e
    if not isinstance(payload, dict):
        raise UpstreamError(f"Unexpected payload returned by {url}")
    return payload


def _join_player(stats: Dict[str, Any], player: Dict[str, Any]) -> Dict[str, Any]:
    """Merge a season-averages row with the identity fields of its player."""
    team = player.get("team") or {}
    if not isinstance(team, dict):
        team = {}
    return {
        "player_id": player.get("id"),
        "first_name": player.get("first_name"),
        "last_name": player.get("last_name"),
        "team_name": team.get("full_name"),
        "pts": stats.get("pts"),
        "games_played": stats.get("games_played"),
        "min": stats.get("min"),
    }


def fetch_primary_records(
    query: SeasonQuery,
    *,
    session: Optional[requests.Session] = None,
    rate_limiter: Optional[RateLimiter] = None,
) -> List[Dict[str, Any]]:
    """Collect raw balldontlie season averages for ``query``.

    Players whose stats request returns a non-200 status are skipped.

    Raises:
        UpstreamError: player list request failed, or a transport error occurred
        NoDataError: no season averages were returned for any player
    """
    own_session = session is None
    if session is None:
        session = requests.Session()
    if rate_limiter is None:
        rate_limiter = RateLimiter()

    headers = _primary_headers()
    records: List[Dict[str, Any]] = []
    try:
        payload = _get_json(
            session,
            f"{BALLDONTLIE_BASE_URL}/players",
            {"per_page": PLAYERS_PER_PAGE},
            headers=headers,
        )
        players = payload.get("data") or []
        if not isinstance(players, list) or not all(isinstance(p, dict) for p in players):
            raise UpstreamError("Unexpected payload: player list is not a list of objects")
        logger.info(f"Fetched {len(players)} players from balldontlie (first page only)")

        for player in players:
            player_id = player.get("id")
            if player_id is None:
                continue

            rate_limiter.wait_if_needed()
            try:
                stats = _get_json(
                    session,
                    f"{BALLDONTLIE_BASE_URL}/season_averages",
                    {"season": query.start_year, "player_ids[]": player_id},
                    headers=headers,
                )
            except UpstreamError as e:
                if e.status_code is None:
                    raise
                logger.debug(f"Skipping player {player_id}: {e}")
                continue

            rows = stats.get("data") or []
            if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
                raise UpstreamError(
                    f"Unexpected payload: season averages for player {player_id} are not objects"
                )
            for row in rows:
                records.append(_join_player(row, player))
    finally:
        if own_session:
            session.close()

    if not records:
        raise NoDataError(f"No data found for the {query.label} season")
    return records


def _parse_league_leaders(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Turn a league leaders ``resultSet`` into a list of row dicts."""
    result_set = payload.get("resultSet")
    if result_set is None and payload.get("resultSets"):
        result_set = payload["resultSets"][0]
    if not isinstance(result_set, dict):
        raise UpstreamError("League leaders response has no result set")

    headers = result_set.get("headers") or []
    rows = result_set.get("rowSet") or []
    if not isinstance(rows, list) or not all(isinstance(r, list) for r in rows):
        raise UpstreamError("Unexpected payload: league leaders rows are not lists")
    return [dict(zip(headers, row)) for row in rows]


def fetch_fallback_records(
    query: SeasonQuery,
    *,
    session: Optional[requests.Session] = None,
    attempts: int = FALLBACK_ATTEMPTS,
    sleep: Callable[[float], None] = time.sleep,
) -> List[Dict[str, Any]]:
    """Collect raw league leader rows from stats.nba.com for ``query``.

    The request is attempted up to ``attempts`` times, immediately one after
    another, before the last UpstreamError is raised.

    Raises:
        UpstreamError: every attempt failed
        NoDataError: the response contained no rows
    """
    own_session = session is None
    if session is None:
        session = requests.Session()

    params = {
        "LeagueID": "00",
        "PerMode": "PerGame",
        "Scope": "RS",
        "Season": query.label,
        "SeasonType": "Regular Season",
        "StatCategory": "PTS",
    }
    retrying = Retrying(
        stop=stop_after_attempt(attempts),
        wait=wait_none(),
        retry=retry_if_exception_type(UpstreamError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        sleep=sleep,
        reraise=True,
    )

    payload: Dict[str, Any] = {}
    try:
        for attempt in retrying:
            with attempt:
                payload = _get_json(session, NBA_STATS_URL, params, headers=BROWSER_HEADERS)
    finally:
        if own_session:
            session.close()

    rows = _parse_league_leaders(payload)
    if not rows:
        raise NoDataError(f"No data found for the {query.label} season")
    return rows


def _from_primary(
    query: SeasonQuery,
    num_players: int,
    session: Optional[requests.Session],
    rate_limiter: Optional[RateLimiter],
) -> FetchOutcome:
    records = fetch_primary_records(query, session=session, rate_limiter=rate_limiter)
    ranked = rank_players(records, PRIMARY_MIN_GAMES, num_players)
    return FetchOutcome(BALLDONTLIE, format_results_table(ranked))


def _from_fallback(
    query: SeasonQuery,
    num_players: int,
    session: Optional[requests.Session],
    sleep: Callable[[float], None],
) -> FetchOutcome:
    records = fetch_fallback_records(query, session=session, sleep=sleep)
    ranked = rank_players(records, FALLBACK_MIN_GAMES, num_players)
    return FetchOutcome(NBA_STATS, format_results_table(ranked))


def fetch_with_source(
    end_year: Any,
    num_players: int = DEFAULT_NUM_PLAYERS,
    *,
    source: str = AUTO,
    session: Optional[requests.Session] = None,
    rate_limiter: Optional[RateLimiter] = None,
    sleep: Callable[[float], None] = time.sleep,
    today_year: Optional[int] = None,
) -> FetchOutcome:
    """Fetch and rank the top scorers of a season.

    With ``source="auto"`` balldontlie is tried first and stats.nba.com is
    used if it fails for any reason. When both fail the fallback's error is
    raised, chained to the primary's.

    Raises:
        InvalidInput: bad year, player count or source name (no network call made)
    """
    query = SeasonQuery.from_value(end_year, today_year=today_year)
    validate_options(num_players, source)

    logger.info(f"Fetching top {num_players} scorers for the {query.label} season (source: {source})")

    if source == BALLDONTLIE:
        return _from_primary(query, num_players, session, rate_limiter)
    if source == NBA_STATS:
        return _from_fallback(query, num_players, session, sleep)

    try:
        return _from_primary(query, num_players, session, rate_limiter)
    except ScoringLeadersError as e:
        logger.warning(f"balldontlie failed: {e}. Falling back to stats.nba.com")
        primary_error = e

    try:
        return _from_fallback(query, num_players, session, sleep)
    except ScoringLeadersError as e:
        logger.error(f"stats.nba.com failed: {e}")
        raise e from primary_error


def fetch_top_scorers(
    end_year: Any,
    num_players: int = DEFAULT_NUM_PLAYERS,
    **kwargs: Any,
) -> List[RankedEntry]:
    """Same as fetch_with_source, returning only the ranked entries."""
    return fetch_with_source(end_year, num_players, **kwargs).entries


__all__ = [
    "RateLimiter",
    "FetchOutcome",
    "fetch_primary_records",
    "fetch_fallback_records",
    "fetch_with_source",
    "fetch_top_scorers",
    "validate_options",
    "SOURCES",
    "AUTO",
    "DEFAULT_API_DELAY",
    "MIN_API_DELAY",
    "MAX_API_DELAY",
]
