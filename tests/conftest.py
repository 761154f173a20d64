"""Test configuration and fixtures for the NBA scoring leaders pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import Mock

import pytest

from nba_scoring_leaders.cache import ScorerCache
from nba_scoring_leaders.fetch import RateLimiter
from nba_scoring_leaders.formatting import RankedEntry


def make_response(status_code: int = 200, payload: Any = None) -> Mock:
    """Build a stand-in for requests.Response."""
    resp = Mock()
    resp.status_code = status_code
    resp.json.return_value = payload
    return resp


def routed_session(routes: Dict[str, Callable[[Dict[str, Any]], Mock]]) -> Mock:
    """Session whose get() dispatches on the last path segment of the URL."""
    session = Mock()

    def _get(url: str, params: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Mock:
        for suffix, handler in routes.items():
            if url.endswith(suffix):
                return handler(params or {})
        raise AssertionError(f"Unexpected URL {url}")

    session.get.side_effect = _get
    return session


@pytest.fixture
def cache(tmp_path: Path) -> ScorerCache:
    return ScorerCache(tmp_path / "cache")


@pytest.fixture
def no_wait_limiter() -> RateLimiter:
    return RateLimiter(base_delay=0.05, sleep=Mock())


@pytest.fixture
def sample_players() -> List[Dict[str, Any]]:
    """First page of the balldontlie player list."""
    return [
        {
            "id": 237,
            "first_name": "LeBron",
            "last_name": "James",
            "team": {"full_name": "Los Angeles Lakers", "abbreviation": "LAL"},
        },
        {
            "id": 115,
            "first_name": "Stephen",
            "last_name": "Curry",
            "team": {"full_name": "Golden State Warriors", "abbreviation": "GSW"},
        },
        {
            "id": 140,
            "first_name": "Kevin",
            "last_name": "Durant",
            "team": {"full_name": "Phoenix Suns", "abbreviation": "PHX"},
        },
    ]


@pytest.fixture
def sample_season_averages() -> Dict[int, Dict[str, Any]]:
    """balldontlie season averages keyed by player id."""
    return {
        237: {"player_id": 237, "season": 2022, "games_played": 55, "pts": 28.9, "min": "35:18"},
        115: {"player_id": 115, "season": 2022, "games_played": 56, "pts": 29.4, "min": "34:42"},
        140: {"player_id": 140, "season": 2022, "games_played": 58, "pts": 29.1, "min": "35:36"},
    }


@pytest.fixture
def balldontlie_session(
    sample_players: List[Dict[str, Any]],
    sample_season_averages: Dict[int, Dict[str, Any]],
) -> Mock:
    def players(params: Dict[str, Any]) -> Mock:
        return make_response(200, {"data": sample_players, "meta": {"next_cursor": 100}})

    def averages(params: Dict[str, Any]) -> Mock:
        row = sample_season_averages.get(params["player_ids[]"])
        return make_response(200, {"data": [row] if row else []})

    return routed_session({"/players": players, "/season_averages": averages})


@pytest.fixture
def league_leaders_payload() -> Dict[str, Any]:
    """Trimmed stats.nba.com leagueleaders response."""
    return {
        "resource": "leagueleaders",
        "resultSet": {
            "name": "LeagueLeaders",
            "headers": [
                "PLAYER_ID",
                "RANK",
                "PLAYER_NAME",
                "TEAM_ID",
                "TEAM_ABBREVIATION",
                "GP",
                "MIN",
                "PTS",
            ],
            "rowSet": [
                [1628983, 1, "Joel Embiid", 1610612755, "PHI", 66, 34.6, 33.1],
                [1628369, 2, "Luka Doncic", 1610612742, "DAL", 66, 36.2, 32.4],
                [201939, 3, "Damian Lillard", 1610612757, "POR", 58, 36.3, 32.2],
                [2544, 4, "L. James", 1610612747, "LAL", 55, 35.5, 27.3],
                [203999, 5, "Short Stint", 1610612743, "DEN", 12, 20.0, 30.0],
            ],
        },
    }


@pytest.fixture
def sample_entries() -> List[RankedEntry]:
    return [
        RankedEntry(1, "Joel Embiid", "PHI", 33.1, 66, 34.6),
        RankedEntry(2, "Luka Doncic", "DAL", 32.4, 66, 36.2),
        RankedEntry(3, "Damian Lillard", "POR", 32.2, 58, 36.3),
    ]
