"""Exception hierarchy for the traffic insights domain."""
from __future__ import annotations


class TrafficInsightsError(Exception):
    """Base exception for all traffic insights errors."""


class AreaNotFoundError(TrafficInsightsError, LookupError):
    """Raised when a name cannot be resolved to any catalog area."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No area found for '{name}'")
        self.name = name


class LaneNotFoundError(TrafficInsightsError, LookupError):
    """Raised when a lane id or area/position pair is unknown."""


class InvalidSpreadsheetError(TrafficInsightsError, ValueError):
    """Raised when an uploaded sheet is unreadable or yields no valid records."""


__all__ = [
    "AreaNotFoundError",
    "InvalidSpreadsheetError",
    "LaneNotFoundError",
    "TrafficInsightsError",
]
