"""Filter, sort and rank players by points per game."""

from __future__ import annotations

import logging

import pandas as pd

from .config import DEFAULT_NUM_PLAYERS
from .exceptions import InvalidInput, NoDataError
from .formatting import Records, decode_records

logger = logging.getLogger(__name__)


def rank_players(
    records: Records,
    min_games_played: int,
    num_players: int = DEFAULT_NUM_PLAYERS,
) -> pd.DataFrame:
    """Rank raw player records by scoring average.

    Players with fewer than ``min_games_played`` games are dropped (a player
    exactly at the threshold is kept). Remaining rows are sorted by ``ppg``
    descending with ties kept in input order, truncated to ``num_players``
    and given a 1-based ``rank``.

    Raises:
        InvalidInput: if ``num_players`` is below 1
        NoDataError: if no player survives filtering
        UnknownSchema: if the records match no known layout
    """
    if num_players < 1:
        raise InvalidInput(f"Number of players must be at least 1, got {num_players}")

    if isinstance(records, pd.DataFrame):
        empty = records.empty
    else:
        records = list(records)
        empty = not records
    if empty:
        raise NoDataError("No data found for the requested season")

    schema, df = decode_records(records)

    df = df.drop(columns=["rank"], errors="ignore").dropna(subset=["ppg", "games_played"])
    qualified = df[df["games_played"] >= min_games_played]
    logger.debug(
        f"{len(qualified)}/{len(df)} {schema} records meet the {min_games_played}-game minimum"
    )
    if qualified.empty:
        raise NoDataError(
            f"No players with at least {min_games_played} games played for the requested season"
        )

    ranked = (
        qualified.sort_values("ppg", ascending=False, kind="stable")
        .head(num_players)
        .reset_index(drop=True)
    )
    ranked.insert(0, "rank", range(1, len(ranked) + 1))
    ranked["games_played"] = ranked["games_played"].astype(int)
    return ranked[["rank", "player", "team", "ppg", "games_played", "minutes_per_game"]]


__all__ = ["rank_players"]
