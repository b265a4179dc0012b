"""Fixed coefficient tables for time-of-day, weekend and area adjustments.

Every multiplier and typical value used by the classifier and the forecasters is
declared here as plain data so the tables can be audited and tested on their
own. Hour ranges are half-open ``[start, end)`` on the 24-hour clock.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Mapping

from traffic_insights.core.entities import TrafficLevel

LOW_THRESHOLD = 35.0
MEDIUM_THRESHOLD = 65.0
MIN_DENSITY = 0.0
MAX_DENSITY = 100.0

WEEKEND_FACTOR = 0.85
WEEKEND_DAYS = frozenset({5, 6})  # datetime.weekday(): Saturday, Sunday

# First matching range wins.
TIME_OF_DAY_FACTORS: tuple[tuple[int, int, float], ...] = (
    (7, 10, 1.3),  # morning peak
    (17, 20, 1.4),  # evening peak
    (12, 14, 1.15),  # lunch
    (23, 24, 0.5),  # late night
    (0, 6, 0.5),
)

CATEGORY_FACTORS: Mapping[str, float] = {
    "highway": 1.1,
    "residential": 0.9,
    "commercial": 1.15,
}
WEEKEND_CATEGORY_FACTORS: Mapping[str, float] = {
    "tourist": 1.2,
}

PEAK_HOURS: tuple[tuple[int, int], ...] = ((7, 10), (17, 20))
QUIET_HOURS: tuple[tuple[int, int], ...] = ((22, 24), (0, 6))

# (level, density, vehicle count) for hours without history.
TYPICAL_PEAK: tuple[TrafficLevel, float, int] = ("high", 75.0, 80)
TYPICAL_QUIET: tuple[TrafficLevel, float, int] = ("low", 15.0, 15)
TYPICAL_DEFAULT: tuple[TrafficLevel, float, int] = ("medium", 45.0, 50)


def _in_ranges(hour: int, ranges: tuple[tuple[int, int], ...]) -> bool:
    return any(start <= hour < end for start, end in ranges)


def time_of_day_factor(hour: int) -> float:
    for start, end, factor in TIME_OF_DAY_FACTORS:
        if start <= hour < end:
            return factor
    return 1.0


def is_weekend(moment: date | datetime) -> bool:
    return moment.weekday() in WEEKEND_DAYS


def category_factor(category: str | None, weekend: bool) -> float:
    if not category:
        return 1.0
    if category in WEEKEND_CATEGORY_FACTORS:
        return WEEKEND_CATEGORY_FACTORS[category] if weekend else 1.0
    return CATEGORY_FACTORS.get(category, 1.0)


def typical_values(hour: int) -> tuple[TrafficLevel, float, int]:
    """Return the typical (level, density, vehicle count) for an hour without data."""
    if _in_ranges(hour, PEAK_HOURS):
        return TYPICAL_PEAK
    if _in_ranges(hour, QUIET_HOURS):
        return TYPICAL_QUIET
    return TYPICAL_DEFAULT


__all__ = [
    "CATEGORY_FACTORS",
    "LOW_THRESHOLD",
    "MAX_DENSITY",
    "MEDIUM_THRESHOLD",
    "MIN_DENSITY",
    "PEAK_HOURS",
    "QUIET_HOURS",
    "TIME_OF_DAY_FACTORS",
    "WEEKEND_CATEGORY_FACTORS",
    "WEEKEND_FACTOR",
    "category_factor",
    "is_weekend",
    "time_of_day_factor",
    "typical_values",
]
