"""Use case summarising an area's traffic per day of the week."""
from __future__ import annotations

import calendar
from datetime import datetime, timedelta
from typing import Callable, Optional, Protocol, Sequence

from traffic_insights.core.entities import HourlyStatistics, TrafficRecord, WeeklyPattern
from traffic_insights.infrastructure.traffic.classifier import level_from_density
from traffic_insights.infrastructure.traffic.patterns import WEEKEND_DAYS
from traffic_insights.utils.config import DEFAULT_WEEKLY_HISTORY_DAYS
from traffic_insights.utils.logger import logger
from traffic_insights.utils.numeric import round_half_up

DEFAULT_PEAK_HOUR = 17
WEEKEND_DEFAULT_DENSITY = 35.0
WEEKDAY_DEFAULT_DENSITY = 55.0


class WeeklyRecordAggregator(Protocol):
    def area_records(self, area_id: str, start: datetime, end: datetime) -> list[TrafficRecord]:
        ...

    def group_by_weekday(self, records: Sequence[TrafficRecord]) -> dict[int, HourlyStatistics]:
        ...

    def hourly_means(self, records: Sequence[TrafficRecord]) -> dict[int, float]:
        ...


class AnalyzeWeeklyPatternsUseCase:
    """Average density and peak hour for Monday through Sunday."""

    def __init__(
        self,
        aggregator: WeeklyRecordAggregator,
        history_days: int = DEFAULT_WEEKLY_HISTORY_DAYS,
        now_provider: Callable[[], datetime] | None = None,
    ) -> None:
        if history_days < 1:
            raise ValueError("history_days must be at least 1")
        self._aggregator = aggregator
        self._history_days = history_days
        self._now = now_provider or datetime.now

    def execute(
        self, area_id: str, reference_time: Optional[datetime] = None
    ) -> list[WeeklyPattern]:
        end = reference_time or self._now()
        start = end - timedelta(days=self._history_days)
        records = self._aggregator.area_records(area_id, start, end)
        by_weekday = self._aggregator.group_by_weekday(records)

        patterns: list[WeeklyPattern] = []
        for day_index in range(7):
            day_name = calendar.day_name[day_index]
            stats = by_weekday.get(day_index)
            if stats is None or stats.sample_count == 0:
                patterns.append(self._default_pattern(day_index, day_name))
                continue

            day_records = [record for record in records if record.timestamp.weekday() == day_index]
            patterns.append(
                WeeklyPattern(
                    day=day_name,
                    day_index=day_index,
                    avg_density=round_half_up(stats.mean_density, 1),
                    peak_hour=self._peak_hour(self._aggregator.hourly_means(day_records)),
                    level=level_from_density(stats.mean_density),
                )
            )

        logger.info(
            "Weekly patterns for area {} from {} records over {} days",
            area_id,
            len(records),
            self._history_days,
        )
        return patterns

    @staticmethod
    def _peak_hour(hourly_means: dict[int, float]) -> int:
        peak_hour, peak_density = DEFAULT_PEAK_HOUR, 0.0
        for hour in sorted(hourly_means):
            if hourly_means[hour] > peak_density:
                peak_hour, peak_density = hour, hourly_means[hour]
        return peak_hour

    @staticmethod
    def _default_pattern(day_index: int, day_name: str) -> WeeklyPattern:
        if day_index in WEEKEND_DAYS:
            return WeeklyPattern(day_name, day_index, WEEKEND_DEFAULT_DENSITY, DEFAULT_PEAK_HOUR, "low")
        return WeeklyPattern(day_name, day_index, WEEKDAY_DEFAULT_DENSITY, DEFAULT_PEAK_HOUR, "medium")


__all__ = ["AnalyzeWeeklyPatternsUseCase", "WeeklyRecordAggregator"]
