"""Tests for the historical aggregator."""
from __future__ import annotations

from datetime import datetime

import pytest

from traffic_insights.core.entities import LaneTrafficRecord, TrafficRecord
from traffic_insights.infrastructure.storage.records import InMemoryTrafficStore
from traffic_insights.infrastructure.traffic.aggregation import HistoricalAggregator


def _area(day: int, hour: int, density: float, minute: int = 15) -> TrafficRecord:
    return TrafficRecord("palace", datetime(2024, 5, day, hour, minute), density, "medium")


def test_group_by_hour_computes_population_variance():
    records = [_area(13, 8, 60), _area(14, 8, 70), _area(15, 8, 65), _area(15, 17, 80)]

    stats = HistoricalAggregator().group_by_hour(records)

    assert set(stats) == {8, 17}
    assert stats[8].sample_count == 3
    assert stats[8].mean_density == pytest.approx(65.0)
    assert stats[8].variance == pytest.approx(50 / 3)
    assert stats[8].mean_vehicle_count is None
    assert stats[17].variance == 0.0


def test_group_by_weekday_uses_monday_as_zero():
    records = [_area(13, 8, 40), _area(18, 9, 20), _area(19, 9, 30)]

    stats = HistoricalAggregator().group_by_weekday(records)

    assert set(stats) == {0, 5, 6}
    assert stats[0].mean_density == 40
    assert stats[5].sample_count == 1


def test_lane_records_carry_vehicle_count_means():
    records = [
        LaneTrafficRecord("lane", datetime(2024, 5, 13, 8), 40, 60.0, "medium"),
        LaneTrafficRecord("lane", datetime(2024, 5, 14, 8), 50, 70.0, "high"),
    ]

    stats = HistoricalAggregator().group_by_hour(records)

    assert stats[8].mean_vehicle_count == pytest.approx(45.0)


def test_empty_input_yields_empty_mapping():
    aggregator = HistoricalAggregator()

    assert aggregator.group_by_hour([]) == {}
    assert aggregator.hourly_means([]) == {}


def test_statistics_fetch_through_the_source():
    store = InMemoryTrafficStore(
        area_records=[_area(13, 8, 60), _area(20, 8, 90), TrafficRecord("krs", datetime(2024, 5, 13, 8), 10, "low")]
    )
    aggregator = HistoricalAggregator(store)

    stats = aggregator.area_hourly_statistics("palace", datetime(2024, 5, 1), datetime(2024, 5, 15))

    assert stats[8].sample_count == 1
    assert stats[8].mean_density == 60


def test_fetching_without_source_is_an_error():
    with pytest.raises(RuntimeError):
        HistoricalAggregator().area_records("palace", datetime(2024, 5, 1), datetime(2024, 5, 2))
