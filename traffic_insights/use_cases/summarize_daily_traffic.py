"""Use case building the per-day analytics summary for an area."""
from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional, Protocol, Sequence

from traffic_insights.core.entities import DailyTrafficSummary, PeakHour, TrafficRecord
from traffic_insights.utils.formatting import format_clock_hour
from traffic_insights.utils.logger import logger


class DailyRecordAggregator(Protocol):
    def area_records(self, area_id: str, start: datetime, end: datetime) -> list[TrafficRecord]:
        ...

    def hourly_means(self, records: Sequence[TrafficRecord]) -> dict[int, float]:
        ...


class SummarizeDailyTrafficUseCase:
    def __init__(self, aggregator: DailyRecordAggregator) -> None:
        self._aggregator = aggregator

    def execute(self, area_id: str, day: date) -> Optional[DailyTrafficSummary]:
        start = datetime.combine(day, time.min)
        end = datetime.combine(day, time.max)
        records = self._aggregator.area_records(area_id, start, end)
        if not records:
            logger.debug("No records for area {} on {}; no summary", area_id, day)
            return None

        hourly_means = self._aggregator.hourly_means(records)
        # Stable sort keeps the earlier hour first on equal densities.
        peak_hours = tuple(
            sorted(
                (PeakHour(hour=hour, density=hourly_means[hour]) for hour in sorted(hourly_means)),
                key=lambda peak: peak.density,
                reverse=True,
            )
        )
        total_density = sum(record.density_score for record in records)

        summary = DailyTrafficSummary(
            area_id=area_id,
            analysis_date=day,
            peak_hours=peak_hours,
            avg_density=total_density / len(records),
            busiest_time=format_clock_hour(peak_hours[0].hour) if peak_hours else None,
            quietest_time=format_clock_hour(peak_hours[-1].hour) if peak_hours else None,
            total_records=len(records),
        )
        logger.info(
            "Daily summary for area {} on {}: {} records, busiest {}",
            area_id,
            day,
            summary.total_records,
            summary.busiest_time,
        )
        return summary


__all__ = ["DailyRecordAggregator", "SummarizeDailyTrafficUseCase"]
