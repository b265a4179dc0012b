"""Use case producing a 24-hour traffic forecast for an area."""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Protocol

from traffic_insights.core.entities import HourlyPrediction, HourlyStatistics
from traffic_insights.infrastructure.traffic.classifier import level_from_density
from traffic_insights.infrastructure.traffic.patterns import (
    MAX_DENSITY,
    MIN_DENSITY,
    WEEKEND_FACTOR,
    is_weekend,
    typical_values,
)
from traffic_insights.utils.config import DEFAULT_HISTORY_DAYS
from traffic_insights.utils.logger import logger
from traffic_insights.utils.numeric import clamp, round_half_up

HOURS_PER_DAY = 24
FALLBACK_CONFIDENCE = 0.3
MAX_CONFIDENCE = 0.95
FULL_SAMPLE_COUNT = 30


class AreaStatisticsProvider(Protocol):
    def area_hourly_statistics(
        self, area_id: str, start: datetime, end: datetime
    ) -> dict[int, HourlyStatistics]:
        ...


def forecast_confidence(sample_count: int, variance: float) -> float:
    """Blend sample volume (70%) and reading stability (30%), capped at 0.95."""
    volume = (sample_count / FULL_SAMPLE_COUNT) * 0.7
    stability = (1 - min(variance / 100, 1)) * 0.3
    return clamp(volume + stability, 0.0, MAX_CONFIDENCE)


def typical_prediction(hour: int) -> HourlyPrediction:
    level, density, _ = typical_values(hour)
    return HourlyPrediction(
        hour=hour,
        predicted_level=level,
        predicted_density=density,
        confidence=FALLBACK_CONFIDENCE,
    )


class ForecastAreaTrafficUseCase:
    """Forecast every hour of the day from the area's recent history."""

    def __init__(
        self, statistics: AreaStatisticsProvider, history_days: int = DEFAULT_HISTORY_DAYS
    ) -> None:
        if history_days < 1:
            raise ValueError("history_days must be at least 1")
        self._statistics = statistics
        self._history_days = history_days

    def execute(self, area_id: str, target_date: datetime) -> list[HourlyPrediction]:
        start = target_date - timedelta(days=self._history_days)
        hourly = self._statistics.area_hourly_statistics(area_id, start, target_date)
        weekend = is_weekend(target_date)

        predictions: list[HourlyPrediction] = []
        for hour in range(HOURS_PER_DAY):
            stats = hourly.get(hour)
            if stats is None or stats.sample_count == 0:
                predictions.append(typical_prediction(hour))
                continue

            density = stats.mean_density * (WEEKEND_FACTOR if weekend else 1.0)
            density = clamp(density, MIN_DENSITY, MAX_DENSITY)
            confidence = forecast_confidence(stats.sample_count, stats.variance)
            predictions.append(
                HourlyPrediction(
                    hour=hour,
                    predicted_level=level_from_density(density),
                    predicted_density=round_half_up(density, 1),
                    confidence=round_half_up(confidence, 2),
                )
            )

        logger.info(
            "Forecast for area {} on {} built from {} observed hours",
            area_id,
            target_date.date(),
            len(hourly),
        )
        return predictions


__all__ = [
    "AreaStatisticsProvider",
    "ForecastAreaTrafficUseCase",
    "forecast_confidence",
    "typical_prediction",
]
