"""Use case recommending whether to avoid or use a set of named locations."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Protocol, Sequence

from traffic_insights.core.entities import (
    Area,
    AreaMapping,
    HourlyPrediction,
    RouteRecommendation,
)
from traffic_insights.utils.config import DEFAULT_MAX_WORKERS, DEFAULT_TARGET_LOCATIONS
from traffic_insights.utils.formatting import format_density
from traffic_insights.utils.logger import logger

MAX_ALTERNATIVES = 2


class AreaDirectory(Protocol):
    def find_by_name(self, name: str) -> Optional[Area]:
        ...

    def list_areas(self) -> list[Area]:
        ...


class AreaMapper(Protocol):
    def resolve(self, text: str) -> AreaMapping:
        ...

    def category_for(self, area_name: str) -> str:
        ...


class AreaForecaster(Protocol):
    def execute(self, area_id: str, target_date: datetime) -> list[HourlyPrediction]:
        ...


@dataclass(frozen=True)
class _ResolvedLocation:
    area: Area
    display_name: str


class RecommendRoutesUseCase:
    """Turn current and next-hour forecasts into avoid/proceed/ideal verdicts."""

    def __init__(
        self,
        directory: AreaDirectory,
        mapper: AreaMapper,
        forecaster: AreaForecaster,
        target_locations: Sequence[str] = DEFAULT_TARGET_LOCATIONS,
        max_workers: int = DEFAULT_MAX_WORKERS,
        now_provider: Callable[[], datetime] | None = None,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._directory = directory
        self._mapper = mapper
        self._forecaster = forecaster
        self._target_locations = tuple(target_locations)
        self._max_workers = max_workers
        self._now = now_provider or datetime.now

    def execute(self, target_time: Optional[datetime] = None) -> list[RouteRecommendation]:
        now = target_time or self._now()
        locations = self._resolve_locations()
        if not locations:
            logger.warning("No locations available for route recommendations")
            return []

        forecasts = self._forecast_all(locations, now)

        recommendations: list[RouteRecommendation] = []
        for location in locations:
            predictions = forecasts.get(location.area.id)
            if predictions is None:
                continue
            recommendation = self._recommend(location, locations, predictions, now.hour)
            if recommendation is not None:
                recommendations.append(recommendation)

        logger.info("Generated {} route recommendations for {}", len(recommendations), now)
        return recommendations

    def _resolve_locations(self) -> list[_ResolvedLocation]:
        resolved: list[_ResolvedLocation] = []
        seen: set[str] = set()

        for name in self._target_locations:
            area = self._directory.find_by_name(name)
            if area is None:
                mapping = self._mapper.resolve(name)
                area = self._directory.find_by_name(mapping.area_name)
                if area is not None:
                    logger.debug("Location '{}' resolved through mapping to {}", name, area.name)
            if area is None:
                logger.warning("Could not resolve recommendation location '{}'", name)
                continue
            if area.id not in seen:
                resolved.append(_ResolvedLocation(area=area, display_name=name))
                seen.add(area.id)

        if resolved:
            return resolved

        all_areas = self._directory.list_areas()
        circles = [area for area in all_areas if area.is_circle]
        fallback = circles or all_areas
        logger.info("Falling back to {} catalog areas for recommendations", len(fallback))
        return [_ResolvedLocation(area=area, display_name=area.name) for area in fallback]

    def _forecast_all(
        self, locations: Sequence[_ResolvedLocation], now: datetime
    ) -> dict[str, list[HourlyPrediction]]:
        results: dict[str, list[HourlyPrediction]] = {}
        workers = min(self._max_workers, len(locations))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                location.area.id: (location, executor.submit(self._forecaster.execute, location.area.id, now))
                for location in locations
            }
            for area_id, (location, future) in futures.items():
                try:
                    results[area_id] = future.result()
                except Exception as error:  # noqa: BLE001
                    logger.warning(
                        "Skipping recommendation for {}: forecast failed ({})",
                        location.area.name,
                        error,
                    )
        return results

    def _recommend(
        self,
        location: _ResolvedLocation,
        locations: Sequence[_ResolvedLocation],
        predictions: Sequence[HourlyPrediction],
        hour: int,
    ) -> Optional[RouteRecommendation]:
        current = next((p for p in predictions if p.hour == hour), None)
        upcoming = next((p for p in predictions if p.hour == (hour + 1) % 24), None)
        if current is None:
            logger.warning("No forecast slot at hour {} for {}", hour, location.area.name)
            return None

        density = format_density(current.predicted_density)
        alternatives: tuple[str, ...] = ()
        if current.predicted_level == "high":
            verdict = "avoid"
            reason = f"Heavy traffic expected ({density}% density)"
            alternatives = self._alternatives(location, locations)
        elif current.predicted_level == "low":
            verdict = "ideal"
            reason = f"Clear roads ({density}% density)"
        else:
            verdict = "proceed"
            if upcoming is not None and upcoming.predicted_level == "high":
                reason = "Moderate now, but expect heavy traffic in 1 hour"
            else:
                reason = f"Moderate traffic ({density}% density)"

        return RouteRecommendation(
            location=location.display_name,
            area_id=location.area.id,
            current_level=current.predicted_level,
            predicted_level=upcoming.predicted_level if upcoming else current.predicted_level,
            recommendation=verdict,
            reason=reason,
            alternatives=alternatives,
        )

    def _alternatives(
        self, location: _ResolvedLocation, locations: Sequence[_ResolvedLocation]
    ) -> tuple[str, ...]:
        candidates = [
            other.display_name
            for other in locations
            if other.area.id != location.area.id
            and self._mapper.category_for(other.area.name) != "highway"
        ]
        return tuple(candidates[:MAX_ALTERNATIVES])


__all__ = [
    "AreaDirectory",
    "AreaForecaster",
    "AreaMapper",
    "RecommendRoutesUseCase",
]
