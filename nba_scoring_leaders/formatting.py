"""Map upstream player stat records to the unified leaderboard schema.

Two upstream layouts are understood:

- ``balldontlie``: season averages joined with player identity
  (``first_name``, ``last_name``, ``team_name``, ``pts``, ``games_played``,
  ``min``). ``min`` arrives as a ``"MM:SS"`` string on most seasons.
- ``nba_stats``: league leaders rows from stats.nba.com (``PLAYER_NAME``,
  ``TEAM_ABBREVIATION``, ``PTS``, ``GP``, ``MIN``).

Records already in the unified layout (``ppg`` column) are detected as
``ranked`` and pass through unchanged apart from rounding.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from .exceptions import UnknownSchema

BALLDONTLIE = "balldontlie"
NBA_STATS = "nba_stats"
RANKED = "ranked"

# Column whose presence identifies each layout
SCHEMA_MARKERS = {
    BALLDONTLIE: "pts",
    NBA_STATS: "PTS",
    RANKED: "ppg",
}

UNIFIED_COLUMNS = ["player", "team", "ppg", "games_played", "minutes_per_game"]

Records = Union[pd.DataFrame, Sequence[Mapping[str, Any]]]


@dataclass(frozen=True)
class RankedEntry:
    rank: int
    player: str
    team: str
    ppg: float
    games_played: int
    minutes_per_game: Optional[float]


ENTRY_FIELDS = [f.name for f in fields(RankedEntry)]


def _to_frame(records: Records) -> pd.DataFrame:
    if isinstance(records, pd.DataFrame):
        return records.copy()
    rows = list(records)
    if rows and isinstance(rows[0], RankedEntry):
        return entries_to_frame(rows)
    return pd.DataFrame(rows)


def detect_schema(columns: Iterable[str]) -> str:
    """Return the schema name for a set of column names.

    Raises UnknownSchema when no marker column is present.
    """
    cols = set(columns)
    for name, marker in SCHEMA_MARKERS.items():
        if marker in cols:
            return name
    raise UnknownSchema(
        f"Unrecognised record layout; columns: {', '.join(sorted(map(str, cols))) or '(none)'}"
    )


def parse_minutes(value: Any) -> float:
    """Convert '34:27' or 34.45 style minutes to a float (NaN if missing)."""
    if value is None:
        return float("nan")
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if not text:
        return float("nan")
    if ":" in text:
        mins, _, secs = text.partition(":")
        try:
            return int(mins) + int(secs or 0) / 60.0
        except ValueError:
            return float("nan")
    try:
        return float(text)
    except ValueError:
        return float("nan")


def _column(df: pd.DataFrame, name: str, default: Any = None) -> pd.Series:
    if name in df.columns:
        return df[name]
    return pd.Series(default, index=df.index, dtype=object)


def _decode_balldontlie(df: pd.DataFrame) -> pd.DataFrame:
    first = _column(df, "first_name", "").fillna("").astype(str)
    last = _column(df, "last_name", "").fillna("").astype(str)
    out = pd.DataFrame(index=df.index)
    out["player"] = (first + " " + last).str.strip()
    out["team"] = _column(df, "team_name")
    out["ppg"] = pd.to_numeric(df["pts"], errors="coerce")
    out["games_played"] = pd.to_numeric(_column(df, "games_played"), errors="coerce")
    out["minutes_per_game"] = _column(df, "min").map(parse_minutes)
    return out


def _decode_nba_stats(df: pd.DataFrame) -> pd.DataFrame:
    out = pd.DataFrame(index=df.index)
    out["player"] = _column(df, "PLAYER_NAME", "").fillna("").astype(str)
    out["team"] = _column(df, "TEAM_ABBREVIATION")
    out["ppg"] = pd.to_numeric(df["PTS"], errors="coerce")
    out["games_played"] = pd.to_numeric(_column(df, "GP"), errors="coerce")
    out["minutes_per_game"] = _column(df, "MIN").map(parse_minutes)
    return out


def decode_records(records: Records) -> Tuple[str, pd.DataFrame]:
    """Detect the layout of ``records`` and map it to the unified columns.

    Returns the schema name and a DataFrame with columns ``player``, ``team``,
    ``ppg``, ``games_played``, ``minutes_per_game`` (plus ``rank`` when the
    input already carried one). Input order is preserved.
    """
    df = _to_frame(records)
    schema = detect_schema(df.columns)

    if schema == BALLDONTLIE:
        out = _decode_balldontlie(df)
    elif schema == NBA_STATS:
        out = _decode_nba_stats(df)
    else:
        missing = [c for c in UNIFIED_COLUMNS if c not in df.columns]
        if missing:
            raise UnknownSchema(f"Ranked records missing columns: {', '.join(missing)}")
        keep = (["rank"] if "rank" in df.columns else []) + UNIFIED_COLUMNS
        out = df[keep].copy()

    return schema, out.reset_index(drop=True)


def format_results_table(records: Records) -> List[RankedEntry]:
    """Produce display-ready entries from raw or ranked records.

    ``ppg`` and ``minutes_per_game`` are rounded to one decimal and ``rank``
    is the 1-based position in the given order. Missing minutes become None.
    """
    _, df = decode_records(records)

    entries: List[RankedEntry] = []
    for position, row in enumerate(df.itertuples(index=False), start=1):
        team = row.team if isinstance(row.team, str) else ""
        games = 0 if pd.isna(row.games_played) else int(row.games_played)
        minutes = None if pd.isna(row.minutes_per_game) else round(float(row.minutes_per_game), 1)
        entries.append(
            RankedEntry(
                rank=position,
                player=str(row.player),
                team=team,
                ppg=round(float(row.ppg), 1),
                games_played=games,
                minutes_per_game=minutes,
            )
        )
    return entries


def entries_to_frame(entries: Sequence[RankedEntry]) -> pd.DataFrame:
    """DataFrame with one row per entry and the RankedEntry field names as columns."""
    return pd.DataFrame([vars(e) for e in entries], columns=ENTRY_FIELDS)


def entries_from_frame(df: pd.DataFrame) -> List[RankedEntry]:
    """Inverse of entries_to_frame, coercing numpy scalars to Python types."""
    return [
        RankedEntry(
            rank=int(row.rank),
            player=str(row.player),
            team=row.team if isinstance(row.team, str) else "",
            ppg=float(row.ppg),
            games_played=int(row.games_played),
            minutes_per_game=None if pd.isna(row.minutes_per_game) else float(row.minutes_per_game),
        )
        for row in df[ENTRY_FIELDS].itertuples(index=False)
    ]


def results_title(season_label: str, num_players: int = 25) -> str:
    return f"Top {num_players} NBA Scoring Leaders (PPG) - {season_label} Season"


def export_filename(season_label: str) -> str:
    return f"NBA_Top_Scorers_{season_label}.csv"


__all__ = [
    "RankedEntry",
    "ENTRY_FIELDS",
    "BALLDONTLIE",
    "NBA_STATS",
    "RANKED",
    "detect_schema",
    "decode_records",
    "format_results_table",
    "entries_to_frame",
    "entries_from_frame",
    "parse_minutes",
    "results_title",
    "export_filename",
]
