"""Season year validation and season label helpers.

NBA seasons span two calendar years and are identified here by the year
they end in: ``2023`` means the 2022-23 season. The label format matches
what stats.nba.com expects for its ``Season`` parameter.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from .config import FIRST_SEASON
from .exceptions import InvalidInput


def current_year() -> int:
    return date.today().year


def validate_year(value: Any, today_year: Optional[int] = None) -> int:
    """Coerce ``value`` to a season end year or raise InvalidInput.

    Accepts ints and numeric strings. The upper bound defaults to the
    current calendar year.
    """
    if today_year is None:
        today_year = current_year()

    if isinstance(value, bool):
        raise InvalidInput("Please enter a valid year (numbers only)")
    try:
        year = int(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidInput("Please enter a valid year (numbers only)") from None

    if year < FIRST_SEASON:
        raise InvalidInput(
            f"Please enter a year from {FIRST_SEASON} onwards (first NBA season)"
        )
    if year > today_year:
        raise InvalidInput(f"Please enter a year up to {today_year}")
    return year


def season_label(end_year: int) -> str:
    """Return the two-year label for a season, e.g. 2023 -> '2022-23'."""
    return f"{end_year - 1}-{end_year % 100:02d}"


@dataclass(frozen=True)
class SeasonQuery:
    """A validated season, identified by its end year."""

    end_year: int

    @classmethod
    def from_value(cls, value: Any, today_year: Optional[int] = None) -> "SeasonQuery":
        return cls(validate_year(value, today_year=today_year))

    @property
    def start_year(self) -> int:
        return self.end_year - 1

    @property
    def label(self) -> str:
        return season_label(self.end_year)


__all__ = ["SeasonQuery", "validate_year", "season_label", "current_year"]
