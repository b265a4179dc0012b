"""Tests for the CurrentTrafficStatusUseCase."""
from __future__ import annotations

from datetime import datetime

import pytest

from traffic_insights.core.entities import HourlyPrediction, LaneHourlyPrediction
from traffic_insights.use_cases.current_status import DEFAULT_STATUS, CurrentTrafficStatusUseCase

NOW = datetime(2024, 5, 15, 8, 45)


class StubAreaForecaster:
    def __init__(self, predictions: list[HourlyPrediction]) -> None:
        self.predictions = predictions
        self.calls: list[tuple[str, datetime]] = []

    def execute(self, area_id, target_date):
        self.calls.append((area_id, target_date))
        return self.predictions


class StubLaneForecaster:
    def __init__(self, forecasts: dict[str, list[LaneHourlyPrediction]]) -> None:
        self.forecasts = forecasts

    def execute_many(self, lane_ids, target_date):
        return {lane_id: self.forecasts.get(lane_id, []) for lane_id in lane_ids}


def _lane_day(level: str, density: float, vehicles: int) -> list[LaneHourlyPrediction]:
    return [LaneHourlyPrediction(hour, level, density, 0.4, vehicles) for hour in range(24)]  # type: ignore[arg-type]


def test_area_status_reads_current_hour_slot():
    predictions = [HourlyPrediction(hour, "low", 20.0, 0.3) for hour in range(24)]
    predictions[8] = HourlyPrediction(8, "high", 72.5, 0.32)
    forecaster = StubAreaForecaster(predictions)
    use_case = CurrentTrafficStatusUseCase(forecaster, now_provider=lambda: NOW)

    status = use_case.for_area("palace")

    assert (status.level, status.display_level) == ("high", "heavy")
    assert status.density == 72.5
    assert status.confidence == 0.32
    assert status.vehicle_count is None
    assert forecaster.calls == [("palace", NOW)]


def test_area_status_defaults_without_slot():
    use_case = CurrentTrafficStatusUseCase(StubAreaForecaster([]), now_provider=lambda: NOW)

    assert use_case.for_area("palace") == DEFAULT_STATUS
    assert DEFAULT_STATUS.display_level == "moderate"


def test_lane_statuses_skip_lanes_without_forecast():
    lanes = StubLaneForecaster(
        {"palace-lane_1": _lane_day("medium", 40.0, 30), "palace-lane_2": _lane_day("low", 12.0, 8)}
    )
    use_case = CurrentTrafficStatusUseCase(StubAreaForecaster([]), lanes, now_provider=lambda: NOW)

    statuses = use_case.for_lanes(["palace-lane_1", "palace-lane_2", "palace-lane_3"])

    assert set(statuses) == {"palace-lane_1", "palace-lane_2"}
    assert statuses["palace-lane_1"].display_level == "moderate"
    assert statuses["palace-lane_1"].vehicle_count == 30
    assert statuses["palace-lane_2"].display_level == "clear"


def test_lane_status_requires_lane_forecaster():
    use_case = CurrentTrafficStatusUseCase(StubAreaForecaster([]))

    with pytest.raises(RuntimeError):
        use_case.for_lanes(["palace-lane_1"])


def test_forecast_24h_uses_injected_clock():
    predictions = [HourlyPrediction(hour, "medium", 45.0, 0.3) for hour in range(24)]
    forecaster = StubAreaForecaster(predictions)
    use_case = CurrentTrafficStatusUseCase(forecaster, now_provider=lambda: NOW)

    assert use_case.forecast_24h("palace") == predictions
    assert forecaster.calls == [("palace", NOW)]
