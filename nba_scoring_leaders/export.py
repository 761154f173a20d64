"""CSV export and chart projection of a leaderboard."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pandas as pd

from .formatting import RankedEntry, entries_to_frame

PLOT_LIMIT = 25


def write_csv(entries: Sequence[RankedEntry], path: str | Path) -> Path:
    """Write a header row plus one row per entry to ``path``."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    entries_to_frame(entries).to_csv(path, index=False)
    return path


def plot_frame(entries: Sequence[RankedEntry], limit: int = PLOT_LIMIT) -> pd.DataFrame:
    """Bar-chart ready projection: top ``limit`` players by PPG with hover text."""
    df = entries_to_frame(entries)
    df = df.sort_values("ppg", ascending=False, kind="stable").head(limit)
    df = df[["player", "ppg", "team", "games_played"]].reset_index(drop=True)
    df["hover"] = (
        df["player"]
        + "<br>Team: " + df["team"]
        + "<br>PPG: " + df["ppg"].map(lambda v: f"{v:.1f}")
        + "<br>Games: " + df["games_played"].astype(str)
    )
    return df


__all__ = ["write_csv", "plot_frame", "PLOT_LIMIT"]
