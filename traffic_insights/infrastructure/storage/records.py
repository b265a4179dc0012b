"""Append-only historical record stores (in-memory and CSV-backed)."""
from __future__ import annotations

import threading
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from traffic_insights.core.entities import LaneTrafficRecord, TrafficRecord
from traffic_insights.utils.logger import logger

AREA_COLUMNS = ("area_id", "timestamp", "density_score", "traffic_level")
LANE_COLUMNS = (
    "lane_id",
    "timestamp",
    "vehicle_count",
    "density_score",
    "traffic_level",
    "avg_speed",
)


class InMemoryTrafficStore:
    """Thread-safe record store answering the two historical query shapes."""

    def __init__(
        self,
        area_records: Iterable[TrafficRecord] = (),
        lane_records: Iterable[LaneTrafficRecord] = (),
    ) -> None:
        self._lock = threading.Lock()
        self._area_records: list[TrafficRecord] = list(area_records)
        self._lane_records: list[LaneTrafficRecord] = list(lane_records)

    def fetch_area_records(
        self, area_id: str, start: datetime, end: datetime
    ) -> list[TrafficRecord]:
        with self._lock:
            matches = [
                record
                for record in self._area_records
                if record.area_id == area_id and start <= record.timestamp <= end
            ]
        return sorted(matches, key=lambda record: record.timestamp)

    def fetch_lane_records(
        self, lane_id: str, start: datetime, end: datetime
    ) -> list[LaneTrafficRecord]:
        with self._lock:
            matches = [
                record
                for record in self._lane_records
                if record.lane_id == lane_id and start <= record.timestamp <= end
            ]
        return sorted(matches, key=lambda record: record.timestamp)

    def append_area_records(self, records: Iterable[TrafficRecord]) -> int:
        batch = list(records)
        with self._lock:
            self._area_records.extend(batch)
        logger.debug("Appended {} area records", len(batch))
        return len(batch)

    def append_lane_records(self, records: Iterable[LaneTrafficRecord]) -> int:
        batch = list(records)
        with self._lock:
            self._lane_records.extend(batch)
        logger.debug("Appended {} lane records", len(batch))
        return len(batch)


class CsvTrafficStore(InMemoryTrafficStore):
    """Record store persisted as two CSV files, rewritten on every append."""

    def __init__(self, area_path: Path, lane_path: Path) -> None:
        self._area_path = Path(area_path)
        self._lane_path = Path(lane_path)
        super().__init__(
            area_records=self._load_area_records(self._area_path),
            lane_records=self._load_lane_records(self._lane_path),
        )

    def append_area_records(self, records: Iterable[TrafficRecord]) -> int:
        count = super().append_area_records(records)
        if count:
            self._save(self._area_path, self._area_frame(), AREA_COLUMNS)
        return count

    def append_lane_records(self, records: Iterable[LaneTrafficRecord]) -> int:
        count = super().append_lane_records(records)
        if count:
            self._save(self._lane_path, self._lane_frame(), LANE_COLUMNS)
        return count

    def _area_frame(self) -> pd.DataFrame:
        with self._lock:
            rows = [
                {
                    "area_id": record.area_id,
                    "timestamp": record.timestamp.isoformat(),
                    "density_score": record.density_score,
                    "traffic_level": record.traffic_level,
                }
                for record in self._area_records
            ]
        return pd.DataFrame(rows, columns=list(AREA_COLUMNS))

    def _lane_frame(self) -> pd.DataFrame:
        with self._lock:
            rows = [
                {
                    "lane_id": record.lane_id,
                    "timestamp": record.timestamp.isoformat(),
                    "vehicle_count": record.vehicle_count,
                    "density_score": record.density_score,
                    "traffic_level": record.traffic_level,
                    "avg_speed": record.avg_speed,
                }
                for record in self._lane_records
            ]
        return pd.DataFrame(rows, columns=list(LANE_COLUMNS))

    @staticmethod
    def _save(path: Path, frame: pd.DataFrame, columns: tuple[str, ...]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        frame.loc[:, list(columns)].to_csv(path, index=False)
        logger.info("Persisted {} rows to {}", len(frame), path)

    @staticmethod
    def _read(path: Path, columns: tuple[str, ...]) -> Optional[pd.DataFrame]:
        if not path.exists():
            logger.info("No existing records at {}; starting empty", path)
            return None

        frame = pd.read_csv(path)
        missing = set(columns) - set(frame.columns)
        if missing:
            raise ValueError(
                f"Record file {path} is missing required columns: " + ", ".join(sorted(missing))
            )
        frame["timestamp"] = pd.to_datetime(frame["timestamp"], format="ISO8601")
        return frame

    @classmethod
    def _load_area_records(cls, path: Path) -> list[TrafficRecord]:
        frame = cls._read(path, AREA_COLUMNS)
        if frame is None:
            return []
        return [
            TrafficRecord(
                area_id=str(row.area_id),
                timestamp=row.timestamp.to_pydatetime(),
                density_score=float(row.density_score),
                traffic_level=str(row.traffic_level),  # type: ignore[arg-type]
            )
            for row in frame.itertuples(index=False)
        ]

    @classmethod
    def _load_lane_records(cls, path: Path) -> list[LaneTrafficRecord]:
        frame = cls._read(path, LANE_COLUMNS)
        if frame is None:
            return []
        return [
            LaneTrafficRecord(
                lane_id=str(row.lane_id),
                timestamp=row.timestamp.to_pydatetime(),
                vehicle_count=int(row.vehicle_count),
                density_score=float(row.density_score),
                traffic_level=str(row.traffic_level),  # type: ignore[arg-type]
                avg_speed=None if pd.isna(row.avg_speed) else float(row.avg_speed),
            )
            for row in frame.itertuples(index=False)
        ]


__all__ = ["CsvTrafficStore", "InMemoryTrafficStore"]
