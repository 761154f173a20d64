"""Error taxonomy for the scoring leaders pipeline."""

from __future__ import annotations

from typing import Optional


class ScoringLeadersError(Exception):
    """Base class for every error raised by this package."""

    pass


class InvalidInput(ScoringLeadersError):
    """Year (or player count) rejected before any network call."""

    pass


class UpstreamError(ScoringLeadersError):
    """Remote API failed: non-success status, transport error or bad payload."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NoDataError(ScoringLeadersError):
    """Well-formed response with nothing left to rank."""

    pass


class UnknownSchema(ScoringLeadersError):
    """Records match none of the known column layouts."""

    pass


__all__ = [
    "ScoringLeadersError",
    "InvalidInput",
    "UpstreamError",
    "NoDataError",
    "UnknownSchema",
]
