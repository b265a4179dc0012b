"""Tests for the ForecastLaneTrafficUseCase."""
from __future__ import annotations

from datetime import datetime

import pytest

from traffic_insights.core.entities import HourlyStatistics
from traffic_insights.use_cases.forecast_lane_traffic import ForecastLaneTrafficUseCase

WEDNESDAY_NOON = datetime(2024, 5, 15, 12, 0)
SATURDAY_NOON = datetime(2024, 5, 18, 12, 0)


def _stats(hour: int, density: float, vehicles: float, count: int = 2) -> HourlyStatistics:
    return HourlyStatistics(key=hour, sample_count=count, mean_density=density, variance=0.0, mean_vehicle_count=vehicles)


class StubLaneStatistics:
    def __init__(self, by_lane: dict[str, dict[int, HourlyStatistics]], failing: set[str] | None = None) -> None:
        self.by_lane = by_lane
        self.failing = failing or set()

    def lane_hourly_statistics(self, lane_id, start, end):
        if lane_id in self.failing:
            raise ConnectionError(f"store unavailable for {lane_id}")
        return self.by_lane.get(lane_id, {})


def test_peak_hour_factor_applies_to_density_and_count():
    use_case = ForecastLaneTrafficUseCase(StubLaneStatistics({"lane": {8: _stats(8, 50.0, 40.0)}}))

    prediction = use_case.execute("lane", WEDNESDAY_NOON)[8]

    assert prediction.predicted_density == pytest.approx(65.0)
    assert prediction.predicted_level == "high"
    assert prediction.predicted_vehicle_count == 52


def test_weekend_factor_applies_to_density_and_count():
    use_case = ForecastLaneTrafficUseCase(StubLaneStatistics({"lane": {11: _stats(11, 60.0, 40.0)}}))

    prediction = use_case.execute("lane", SATURDAY_NOON)[11]

    assert prediction.predicted_density == pytest.approx(51.0)
    assert prediction.predicted_vehicle_count == 34


def test_density_is_clamped_after_evening_factor():
    use_case = ForecastLaneTrafficUseCase(StubLaneStatistics({"lane": {18: _stats(18, 90.0, 100.0)}}))

    prediction = use_case.execute("lane", WEDNESDAY_NOON)[18]

    assert prediction.predicted_density == 100.0
    assert prediction.predicted_vehicle_count == 140


def test_typical_vehicle_counts_without_history():
    predictions = ForecastLaneTrafficUseCase(StubLaneStatistics({})).execute("lane", WEDNESDAY_NOON)

    assert len(predictions) == 24
    assert predictions[8].predicted_vehicle_count == 80
    assert predictions[2].predicted_vehicle_count == 15
    assert predictions[13].predicted_vehicle_count == 50


def test_execute_many_isolates_failures():
    statistics = StubLaneStatistics({"a": {8: _stats(8, 50.0, 40.0)}}, failing={"b"})
    use_case = ForecastLaneTrafficUseCase(statistics, max_workers=2)

    results = use_case.execute_many(["a", "b", "c", "a"], WEDNESDAY_NOON)

    assert set(results) == {"a", "b", "c"}
    assert results["b"] == []
    assert len(results["a"]) == 24
    assert len(results["c"]) == 24
    assert use_case.execute_many([], WEDNESDAY_NOON) == {}


def test_trend_uses_injected_clock():
    statistics = StubLaneStatistics(
        {"lane": {14: _stats(14, 40.0, 20.0), 15: _stats(15, 40.0, 20.0), 16: _stats(16, 80.0, 50.0), 17: _stats(17, 80.0, 50.0)}}
    )
    use_case = ForecastLaneTrafficUseCase(statistics, now_provider=lambda: datetime(2024, 5, 15, 14, 10))

    trend = use_case.trend("lane", hours_ahead=3)

    assert trend.trend == "increasing"
    assert [prediction.hour for prediction in trend.predictions] == [14, 15, 16]


def test_trend_near_midnight_is_stable():
    use_case = ForecastLaneTrafficUseCase(StubLaneStatistics({}))

    trend = use_case.trend("lane", reference_time=datetime(2024, 5, 15, 23, 30))

    assert trend.trend == "stable"
    assert len(trend.predictions) == 1


def test_invalid_worker_count_is_rejected():
    with pytest.raises(ValueError):
        ForecastLaneTrafficUseCase(StubLaneStatistics({}), max_workers=0)


@pytest.mark.parametrize("hours_ahead", [0, -2])
def test_empty_trend_window_is_stable(hours_ahead):
    use_case = ForecastLaneTrafficUseCase(StubLaneStatistics({"lane": {14: _stats(14, 40.0, 20.0)}}))

    trend = use_case.trend("lane", hours_ahead=hours_ahead, reference_time=datetime(2024, 5, 15, 14, 0))

    assert trend.trend == "stable"
    assert trend.predictions == ()
