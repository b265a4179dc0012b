"""Group historical traffic records by hour-of-day or weekday."""
from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence, Union

import pandas as pd

from traffic_insights.core.entities import HourlyStatistics, LaneTrafficRecord, TrafficRecord
from traffic_insights.utils.logger import logger

HistoricalRecord = Union[TrafficRecord, LaneTrafficRecord]


class RecordSource(Protocol):
    def fetch_area_records(
        self, area_id: str, start: datetime, end: datetime
    ) -> list[TrafficRecord]:
        ...

    def fetch_lane_records(
        self, lane_id: str, start: datetime, end: datetime
    ) -> list[LaneTrafficRecord]:
        ...


class HistoricalAggregator:
    """Compute per-bucket mean and population variance of density readings."""

    def __init__(self, source: RecordSource | None = None) -> None:
        self._source = source

    def area_records(self, area_id: str, start: datetime, end: datetime) -> list[TrafficRecord]:
        return self._require_source().fetch_area_records(area_id, start, end)

    def lane_records(self, lane_id: str, start: datetime, end: datetime) -> list[LaneTrafficRecord]:
        return self._require_source().fetch_lane_records(lane_id, start, end)

    def area_hourly_statistics(
        self, area_id: str, start: datetime, end: datetime
    ) -> dict[int, HourlyStatistics]:
        records = self.area_records(area_id, start, end)
        logger.debug("Aggregating {} records for area {}", len(records), area_id)
        return self.group_by_hour(records)

    def lane_hourly_statistics(
        self, lane_id: str, start: datetime, end: datetime
    ) -> dict[int, HourlyStatistics]:
        records = self.lane_records(lane_id, start, end)
        logger.debug("Aggregating {} records for lane {}", len(records), lane_id)
        return self.group_by_hour(records)

    def group_by_hour(self, records: Sequence[HistoricalRecord]) -> dict[int, HourlyStatistics]:
        return self._group(records, key="hour")

    def group_by_weekday(self, records: Sequence[HistoricalRecord]) -> dict[int, HourlyStatistics]:
        """Group by ``datetime.weekday()`` (Monday is 0)."""
        return self._group(records, key="weekday")

    def hourly_means(self, records: Sequence[HistoricalRecord]) -> dict[int, float]:
        return {hour: stats.mean_density for hour, stats in self.group_by_hour(records).items()}

    def _group(self, records: Sequence[HistoricalRecord], key: str) -> dict[int, HourlyStatistics]:
        if not records:
            return {}

        frame = self._to_frame(records)
        has_vehicle_counts = "vehicle_count" in frame.columns
        summary = frame.groupby(key)["density_score"].agg(
            sample_count="count",
            mean_density="mean",
            variance=lambda values: values.var(ddof=0),
        )
        vehicle_means = (
            frame.groupby(key)["vehicle_count"].mean() if has_vehicle_counts else None
        )

        statistics: dict[int, HourlyStatistics] = {}
        for bucket, row in summary.iterrows():
            bucket_key = int(bucket)
            statistics[bucket_key] = HourlyStatistics(
                key=bucket_key,
                sample_count=int(row["sample_count"]),
                mean_density=float(row["mean_density"]),
                variance=float(row["variance"]),
                mean_vehicle_count=(
                    float(vehicle_means.loc[bucket]) if vehicle_means is not None else None
                ),
            )
        return statistics

    @staticmethod
    def _to_frame(records: Sequence[HistoricalRecord]) -> pd.DataFrame:
        # Hours come from each timestamp as recorded, which keeps mixed offsets intact.
        rows: list[dict[str, float | int]] = []
        for record in records:
            row: dict[str, float | int] = {
                "hour": record.timestamp.hour,
                "weekday": record.timestamp.weekday(),
                "density_score": float(record.density_score),
            }
            if isinstance(record, LaneTrafficRecord):
                row["vehicle_count"] = int(record.vehicle_count)
            rows.append(row)
        return pd.DataFrame(rows)

    def _require_source(self) -> RecordSource:
        if self._source is None:
            raise RuntimeError("HistoricalAggregator was created without a record source")
        return self._source


__all__ = ["HistoricalAggregator", "HistoricalRecord", "RecordSource"]
