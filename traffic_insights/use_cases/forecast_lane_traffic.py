"""Use case forecasting per-lane traffic and short-term congestion trends."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional, Protocol

from traffic_insights.core.entities import CongestionTrend, HourlyStatistics, LaneHourlyPrediction
from traffic_insights.infrastructure.traffic.classifier import level_from_density
from traffic_insights.infrastructure.traffic.patterns import (
    MAX_DENSITY,
    MIN_DENSITY,
    WEEKEND_FACTOR,
    is_weekend,
    time_of_day_factor,
    typical_values,
)
from traffic_insights.infrastructure.traffic.trend import classify_trend
from traffic_insights.use_cases.forecast_area_traffic import (
    FALLBACK_CONFIDENCE,
    HOURS_PER_DAY,
    forecast_confidence,
)
from traffic_insights.utils.config import (
    DEFAULT_HISTORY_DAYS,
    DEFAULT_MAX_WORKERS,
    DEFAULT_TREND_HOURS_AHEAD,
)
from traffic_insights.utils.logger import logger
from traffic_insights.utils.numeric import clamp, round_half_up


class LaneStatisticsProvider(Protocol):
    def lane_hourly_statistics(
        self, lane_id: str, start: datetime, end: datetime
    ) -> dict[int, HourlyStatistics]:
        ...


def typical_lane_prediction(hour: int) -> LaneHourlyPrediction:
    level, density, vehicle_count = typical_values(hour)
    return LaneHourlyPrediction(
        hour=hour,
        predicted_level=level,
        predicted_density=density,
        confidence=FALLBACK_CONFIDENCE,
        predicted_vehicle_count=vehicle_count,
    )


class ForecastLaneTrafficUseCase:
    """Forecast vehicle counts and density for each hour of a lane's day.

    Unlike the area forecast, lane values are shaped by the time-of-day factors
    after the weekend reduction, so peaks are sharper at lane level.
    """

    def __init__(
        self,
        statistics: LaneStatisticsProvider,
        history_days: int = DEFAULT_HISTORY_DAYS,
        max_workers: int = DEFAULT_MAX_WORKERS,
        now_provider: Callable[[], datetime] | None = None,
    ) -> None:
        if history_days < 1:
            raise ValueError("history_days must be at least 1")
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._statistics = statistics
        self._history_days = history_days
        self._max_workers = max_workers
        self._now = now_provider or datetime.now

    def execute(self, lane_id: str, target_date: datetime) -> list[LaneHourlyPrediction]:
        start = target_date - timedelta(days=self._history_days)
        hourly = self._statistics.lane_hourly_statistics(lane_id, start, target_date)
        weekend_factor = WEEKEND_FACTOR if is_weekend(target_date) else 1.0

        predictions: list[LaneHourlyPrediction] = []
        for hour in range(HOURS_PER_DAY):
            stats = hourly.get(hour)
            if stats is None or stats.sample_count == 0:
                predictions.append(typical_lane_prediction(hour))
                continue

            hour_factor = time_of_day_factor(hour)
            vehicle_count = (stats.mean_vehicle_count or 0.0) * weekend_factor * hour_factor
            density = clamp(stats.mean_density * weekend_factor * hour_factor, MIN_DENSITY, MAX_DENSITY)
            confidence = forecast_confidence(stats.sample_count, stats.variance)

            predictions.append(
                LaneHourlyPrediction(
                    hour=hour,
                    predicted_level=level_from_density(density),
                    predicted_density=round_half_up(density, 1),
                    confidence=round_half_up(confidence, 2),
                    predicted_vehicle_count=max(0, int(round_half_up(vehicle_count))),
                )
            )

        logger.debug("Lane {} forecast built from {} observed hours", lane_id, len(hourly))
        return predictions

    def execute_many(
        self, lane_ids: Iterable[str], target_date: datetime
    ) -> dict[str, list[LaneHourlyPrediction]]:
        """Forecast several lanes concurrently; a failing lane yields an empty list."""
        lane_ids = list(dict.fromkeys(lane_ids))
        if not lane_ids:
            return {}

        results: dict[str, list[LaneHourlyPrediction]] = {}
        workers = min(self._max_workers, len(lane_ids))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                lane_id: executor.submit(self.execute, lane_id, target_date) for lane_id in lane_ids
            }
            for lane_id, future in futures.items():
                try:
                    results[lane_id] = future.result()
                except Exception as error:  # noqa: BLE001
                    logger.warning("Forecast for lane {} failed: {}", lane_id, error)
                    results[lane_id] = []

        logger.info("Forecast {} lanes for {}", len(results), target_date.date())
        return results

    def trend(
        self,
        lane_id: str,
        hours_ahead: int = DEFAULT_TREND_HOURS_AHEAD,
        reference_time: Optional[datetime] = None,
    ) -> CongestionTrend:
        """Trend over the next ``hours_ahead`` slots; a window under two slots is stable."""
        now = reference_time or self._now()
        predictions = self.execute(lane_id, now)
        trend = classify_trend(predictions, now.hour, hours_ahead)
        logger.debug("Lane {} trend over {}h from {}:00 is {}", lane_id, hours_ahead, now.hour, trend.trend)
        return trend


__all__ = [
    "ForecastLaneTrafficUseCase",
    "LaneStatisticsProvider",
    "typical_lane_prediction",
]
