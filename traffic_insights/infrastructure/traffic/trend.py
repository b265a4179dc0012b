"""Short-horizon congestion trend derived from forecast slots."""
from __future__ import annotations

import math
from typing import Sequence

from traffic_insights.core.entities import CongestionTrend, HourlyPrediction, TrendDirection

TREND_THRESHOLD = 10.0


def upcoming_slots(
    predictions: Sequence[HourlyPrediction], current_hour: int, hours_ahead: int
) -> list[HourlyPrediction]:
    """Slots from ``current_hour`` forward, not wrapping past midnight."""
    window = [
        prediction
        for prediction in predictions
        if current_hour <= prediction.hour < current_hour + hours_ahead
    ]
    return window[:hours_ahead]


def trend_direction(densities: Sequence[float]) -> TrendDirection:
    if len(densities) < 2:
        return "stable"

    split = math.ceil(len(densities) / 2)
    first_half = densities[:split]
    second_half = densities[split:]
    difference = sum(second_half) / len(second_half) - sum(first_half) / len(first_half)

    if difference > TREND_THRESHOLD:
        return "increasing"
    if difference < -TREND_THRESHOLD:
        return "decreasing"
    return "stable"


def classify_trend(
    predictions: Sequence[HourlyPrediction], current_hour: int, hours_ahead: int = 3
) -> CongestionTrend:
    window = upcoming_slots(predictions, current_hour, hours_ahead)
    direction = trend_direction([prediction.predicted_density for prediction in window])
    return CongestionTrend(trend=direction, predictions=tuple(window))


__all__ = ["TREND_THRESHOLD", "classify_trend", "trend_direction", "upcoming_slots"]
