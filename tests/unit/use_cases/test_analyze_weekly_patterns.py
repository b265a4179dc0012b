"""Tests for the AnalyzeWeeklyPatternsUseCase."""
from __future__ import annotations

from datetime import datetime

import pytest

from traffic_insights.core.entities import TrafficRecord
from traffic_insights.infrastructure.storage.records import InMemoryTrafficStore
from traffic_insights.infrastructure.traffic.aggregation import HistoricalAggregator
from traffic_insights.use_cases.analyze_weekly_patterns import AnalyzeWeeklyPatternsUseCase

REFERENCE = datetime(2024, 5, 15, 12, 0)


@pytest.fixture
def use_case() -> AnalyzeWeeklyPatternsUseCase:
    store = InMemoryTrafficStore(
        area_records=[
            TrafficRecord("palace", datetime(2024, 5, 13, 8, 0), 60, "medium"),
            TrafficRecord("palace", datetime(2024, 5, 13, 8, 30), 80, "high"),
            TrafficRecord("palace", datetime(2024, 5, 13, 17, 0), 50, "medium"),
            TrafficRecord("palace", datetime(2024, 5, 11, 10, 0), 20, "low"),
            TrafficRecord("palace", datetime(2024, 4, 2, 9, 0), 90, "high"),
        ]
    )
    return AnalyzeWeeklyPatternsUseCase(HistoricalAggregator(store), now_provider=lambda: REFERENCE)


def test_patterns_cover_monday_to_sunday(use_case):
    patterns = use_case.execute("palace")

    assert [pattern.day for pattern in patterns] == [
        "Monday",
        "Tuesday",
        "Wednesday",
        "Thursday",
        "Friday",
        "Saturday",
        "Sunday",
    ]
    assert [pattern.day_index for pattern in patterns] == list(range(7))
    assert patterns[0].day_index == datetime(2024, 5, 13).weekday()


def test_observed_days_use_history(use_case):
    patterns = use_case.execute("palace")

    monday = patterns[0]
    assert monday.avg_density == 63.3
    assert monday.peak_hour == 8
    assert monday.level == "medium"

    saturday = patterns[5]
    assert (saturday.avg_density, saturday.peak_hour, saturday.level) == (20.0, 10, "low")


def test_records_outside_window_are_ignored(use_case):
    tuesday = use_case.execute("palace")[1]

    assert (tuesday.avg_density, tuesday.peak_hour, tuesday.level) == (55.0, 17, "medium")


def test_default_weekend_pattern(use_case):
    sunday = use_case.execute("palace", reference_time=REFERENCE)[6]

    assert (sunday.avg_density, sunday.peak_hour, sunday.level) == (35.0, 17, "low")


def test_peak_hour_ties_keep_earliest_hour():
    store = InMemoryTrafficStore(
        area_records=[
            TrafficRecord("gokulam", datetime(2024, 5, 14, 9, 0), 40, "medium"),
            TrafficRecord("gokulam", datetime(2024, 5, 14, 18, 0), 40, "medium"),
        ]
    )
    use_case = AnalyzeWeeklyPatternsUseCase(HistoricalAggregator(store))

    tuesday = use_case.execute("gokulam", reference_time=REFERENCE)[1]

    assert tuesday.peak_hour == 9


def test_invalid_history_days():
    with pytest.raises(ValueError):
        AnalyzeWeeklyPatternsUseCase(HistoricalAggregator(InMemoryTrafficStore()), history_days=0)
