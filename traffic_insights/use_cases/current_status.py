"""Use case answering "what is the traffic right now" for areas and lanes."""
from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterable, Optional, Protocol, Sequence

from traffic_insights.core.entities import (
    DISPLAY_LEVELS,
    CurrentTrafficStatus,
    HourlyPrediction,
    LaneHourlyPrediction,
)
from traffic_insights.utils.logger import logger

DEFAULT_STATUS = CurrentTrafficStatus(
    level="medium",
    display_level="moderate",
    density=50.0,
    confidence=0.3,
)


class AreaForecaster(Protocol):
    def execute(self, area_id: str, target_date: datetime) -> list[HourlyPrediction]:
        ...


class LaneForecaster(Protocol):
    def execute_many(
        self, lane_ids: Iterable[str], target_date: datetime
    ) -> dict[str, list[LaneHourlyPrediction]]:
        ...


def _slot_for_hour(
    predictions: Sequence[HourlyPrediction], hour: int
) -> Optional[HourlyPrediction]:
    return next((prediction for prediction in predictions if prediction.hour == hour), None)


class CurrentTrafficStatusUseCase:
    """Derive current traffic from the forecast slot of the current local hour.

    The dashboard and the CLI read current traffic only through this class.
    """

    def __init__(
        self,
        area_forecaster: AreaForecaster,
        lane_forecaster: LaneForecaster | None = None,
        now_provider: Callable[[], datetime] | None = None,
    ) -> None:
        self._area_forecaster = area_forecaster
        self._lane_forecaster = lane_forecaster
        self._now = now_provider or datetime.now

    def for_area(self, area_id: str) -> CurrentTrafficStatus:
        now = self._now()
        slot = _slot_for_hour(self._area_forecaster.execute(area_id, now), now.hour)
        if slot is None:
            logger.warning("No forecast slot for area {} at hour {}; using default", area_id, now.hour)
            return DEFAULT_STATUS

        return CurrentTrafficStatus(
            level=slot.predicted_level,
            display_level=DISPLAY_LEVELS[slot.predicted_level],
            density=slot.predicted_density,
            confidence=slot.confidence,
        )

    def for_lanes(self, lane_ids: Iterable[str]) -> dict[str, CurrentTrafficStatus]:
        if self._lane_forecaster is None:
            raise RuntimeError("Lane status requested but no lane forecaster was configured")

        now = self._now()
        forecasts = self._lane_forecaster.execute_many(lane_ids, now)

        statuses: dict[str, CurrentTrafficStatus] = {}
        for lane_id, predictions in forecasts.items():
            slot = _slot_for_hour(predictions, now.hour)
            if not isinstance(slot, LaneHourlyPrediction):
                continue
            statuses[lane_id] = CurrentTrafficStatus(
                level=slot.predicted_level,
                display_level=DISPLAY_LEVELS[slot.predicted_level],
                density=slot.predicted_density,
                confidence=slot.confidence,
                vehicle_count=slot.predicted_vehicle_count,
            )
        return statuses

    def forecast_24h(self, area_id: str) -> list[HourlyPrediction]:
        return self._area_forecaster.execute(area_id, self._now())


__all__ = [
    "AreaForecaster",
    "CurrentTrafficStatusUseCase",
    "DEFAULT_STATUS",
    "LaneForecaster",
]
