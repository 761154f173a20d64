from __future__ import annotations

from typing import Any, Dict, List

import pytest

from nba_scoring_leaders.config import FALLBACK_MIN_GAMES, PRIMARY_MIN_GAMES
from nba_scoring_leaders.exceptions import InvalidInput, NoDataError, UnknownSchema
from nba_scoring_leaders.ranking import rank_players


def _row(name: str, pts: float, gp: int) -> Dict[str, Any]:
    return {"PLAYER_NAME": name, "TEAM_ABBREVIATION": "TST", "PTS": pts, "GP": gp, "MIN": 30.0}


class TestRankPlayers:
    def test_sorted_descending_with_ranks(self) -> None:
        rows = [_row("A", 20.0, 70), _row("B", 31.5, 70), _row("C", 25.2, 70)]
        ranked = rank_players(rows, min_games_played=58)
        assert list(ranked["player"]) == ["B", "C", "A"]
        assert list(ranked["rank"]) == [1, 2, 3]
        ppg = list(ranked["ppg"])
        assert all(a >= b for a, b in zip(ppg, ppg[1:]))

    def test_threshold_boundary_is_inclusive(self) -> None:
        rows = [_row("Below", 40.0, 57), _row("Exact", 30.0, 58), _row("Above", 20.0, 59)]
        ranked = rank_players(rows, min_games_played=58)
        assert list(ranked["player"]) == ["Exact", "Above"]

    def test_ties_keep_input_order(self) -> None:
        rows = [_row("First", 25.0, 70), _row("Top", 30.0, 70), _row("Second", 25.0, 70)]
        ranked = rank_players(rows, min_games_played=1)
        assert list(ranked["player"]) == ["Top", "First", "Second"]

    def test_truncates_to_num_players(self) -> None:
        rows = [_row(f"P{i}", float(i), 70) for i in range(40)]
        ranked = rank_players(rows, min_games_played=1)
        assert len(ranked) == 25
        assert ranked.iloc[0]["player"] == "P39"
        assert len(rank_players(rows, min_games_played=1, num_players=5)) == 5

    def test_fewer_rows_than_requested(self) -> None:
        ranked = rank_players([_row("A", 20.0, 70)], min_games_played=1, num_players=10)
        assert len(ranked) == 1

    def test_joins_first_and_last_name(self) -> None:
        rows = [{"first_name": "Kevin", "last_name": "Durant", "team_name": "Phoenix Suns",
                 "pts": 29.1, "games_played": 58, "min": "35:36"}]
        ranked = rank_players(rows, min_games_played=PRIMARY_MIN_GAMES)
        assert ranked.iloc[0]["player"] == "Kevin Durant"
        assert ranked.iloc[0]["team"] == "Phoenix Suns"

    def test_nobody_qualifies(self) -> None:
        with pytest.raises(NoDataError):
            rank_players([_row("A", 30.0, 10)], min_games_played=PRIMARY_MIN_GAMES)

    def test_empty_input(self) -> None:
        with pytest.raises(NoDataError):
            rank_players([], min_games_played=FALLBACK_MIN_GAMES)

    def test_invalid_count(self) -> None:
        with pytest.raises(InvalidInput):
            rank_players([_row("A", 30.0, 70)], min_games_played=1, num_players=0)

    def test_unknown_layout(self) -> None:
        with pytest.raises(UnknownSchema):
            rank_players([{"name": "A", "points": 30}], min_games_played=1)


def test_source_thresholds_stay_distinct() -> None:
    assert PRIMARY_MIN_GAMES == 58
    assert FALLBACK_MIN_GAMES == 20
    rows: List[Dict[str, Any]] = [_row("A", 30.0, 40)]
    assert len(rank_players(rows, FALLBACK_MIN_GAMES)) == 1
    with pytest.raises(NoDataError):
        rank_players(rows, PRIMARY_MIN_GAMES)
