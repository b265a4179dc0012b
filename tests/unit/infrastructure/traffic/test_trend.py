"""Tests for congestion trend classification."""
from __future__ import annotations

from traffic_insights.core.entities import HourlyPrediction
from traffic_insights.infrastructure.traffic.trend import classify_trend, trend_direction, upcoming_slots


def _forecast(densities: dict[int, float]) -> list[HourlyPrediction]:
    return [HourlyPrediction(hour, "medium", densities.get(hour, 45.0), 0.3) for hour in range(24)]


def test_rising_window_is_increasing():
    predictions = _forecast({14: 40, 15: 40, 16: 80, 17: 80})

    trend = classify_trend(predictions, current_hour=14, hours_ahead=3)

    assert trend.trend == "increasing"
    assert [prediction.hour for prediction in trend.predictions] == [14, 15, 16]


def test_falling_window_is_decreasing():
    trend = classify_trend(_forecast({8: 90, 9: 80, 10: 40, 11: 30}), current_hour=8, hours_ahead=4)

    assert trend.trend == "decreasing"


def test_small_differences_are_stable():
    assert trend_direction([40, 45, 50]) == "stable"


def test_window_does_not_wrap_past_midnight():
    window = upcoming_slots(_forecast({}), current_hour=23, hours_ahead=3)

    assert [prediction.hour for prediction in window] == [23]
    assert classify_trend(_forecast({}), current_hour=23).trend == "stable"


def test_odd_windows_split_with_larger_first_half():
    # First half [40, 40] (mean 40), second half [55]; +15 is increasing.
    assert trend_direction([40, 40, 55]) == "increasing"
    assert trend_direction([40]) == "stable"
