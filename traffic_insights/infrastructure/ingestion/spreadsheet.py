"""Parse uploaded traffic spreadsheets into validated records."""
from __future__ import annotations

import math
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import pandas as pd

from traffic_insights.core.entities import (
    LANE_POSITIONS,
    LanePosition,
    ParsedLaneTrafficRecord,
    ParsedTrafficRecord,
)
from traffic_insights.core.exceptions import InvalidSpreadsheetError
from traffic_insights.infrastructure.traffic.classifier import TrafficLevelClassifier
from traffic_insights.utils.logger import logger

MAX_AREA_NAME_LENGTH = 100
MIN_AREA_NAME_LENGTH = 2
EXCEL_SUFFIXES = frozenset({".xlsx", ".xls"})


class SpreadsheetTrafficParser:
    """Read the first sheet of an upload and keep only rows that validate."""

    def __init__(self, classifier: TrafficLevelClassifier | None = None) -> None:
        self._classifier = classifier or TrafficLevelClassifier()

    def parse_area_records(self, path: Path) -> list[ParsedTrafficRecord]:
        frame = self.load(path)
        records: list[ParsedTrafficRecord] = []

        for row in frame.to_dict(orient="records"):
            area_name = _location_name(row)
            if area_name is None or _is_blank(row.get("timestamp")) or _is_blank(row.get("density")):
                continue

            area_name = self._sanitize_area_name(area_name)
            if area_name is None:
                continue

            density = self._parse_density(row.get("density"))
            timestamp = self._parse_timestamp(row.get("timestamp"))
            if density is None or timestamp is None:
                continue

            records.append(
                ParsedTrafficRecord(
                    area_name=area_name,
                    timestamp=timestamp,
                    density_score=density,
                    traffic_level=self._classifier.classify(density, timestamp),
                )
            )

        if not records:
            raise InvalidSpreadsheetError("No valid traffic records found in spreadsheet")

        logger.info("Parsed {} traffic records from {}", len(records), path)
        return records

    def parse_lane_records(self, path: Path) -> list[ParsedLaneTrafficRecord]:
        frame = self.load(path)
        records: list[ParsedLaneTrafficRecord] = []

        for row in frame.to_dict(orient="records"):
            area_name = _location_name(row)
            required = ("timestamp", "lane_position", "vehicle_count", "density")
            if area_name is None or any(_is_blank(row.get(column)) for column in required):
                continue

            area_name = self._sanitize_area_name(area_name)
            if area_name is None:
                continue

            lane_position = self._parse_lane_position(row.get("lane_position"))
            vehicle_count = self._parse_vehicle_count(row.get("vehicle_count"))
            density = self._parse_density(row.get("density"))
            if lane_position is None or vehicle_count is None or density is None:
                continue

            avg_speed = self._parse_avg_speed(row.get("avg_speed"))
            timestamp = self._parse_timestamp(row.get("timestamp"))
            if timestamp is None:
                continue

            records.append(
                ParsedLaneTrafficRecord(
                    area_name=area_name,
                    lane_position=lane_position,
                    timestamp=timestamp,
                    vehicle_count=vehicle_count,
                    density_score=density,
                    traffic_level=self._classifier.classify(density, timestamp),
                    avg_speed=avg_speed,
                )
            )

        if not records:
            raise InvalidSpreadsheetError("No valid lane traffic records found in spreadsheet")

        logger.info("Parsed {} lane traffic records from {}", len(records), path)
        return records

    def load(self, path: Path) -> pd.DataFrame:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Spreadsheet not found: {path}")

        suffix = path.suffix.lower()
        try:
            if suffix in EXCEL_SUFFIXES:
                frame = pd.read_excel(path, sheet_name=0, dtype=object)
            elif suffix == ".csv":
                frame = pd.read_csv(path, dtype=object)
            else:
                raise InvalidSpreadsheetError(f"Unsupported spreadsheet format: {suffix or path.name}")
        except (ValueError, OSError) as error:
            if isinstance(error, InvalidSpreadsheetError):
                raise
            raise InvalidSpreadsheetError(f"Failed to read spreadsheet {path}: {error}") from error

        if frame.empty:
            raise InvalidSpreadsheetError("Spreadsheet is empty")

        frame.columns = [str(column).strip().lower() for column in frame.columns]
        return frame

    @staticmethod
    def _sanitize_area_name(raw: str) -> Optional[str]:
        name = raw.strip()[:MAX_AREA_NAME_LENGTH]
        if len(name) < MIN_AREA_NAME_LENGTH:
            logger.warning("Invalid area name: {!r}", raw)
            return None
        return name

    @staticmethod
    def _parse_density(value: Any) -> Optional[float]:
        density = _to_float(value)
        if density is None or density < 0 or density > 100:
            logger.warning("Invalid density score: {}", value)
            return None
        return density

    @staticmethod
    def _parse_lane_position(value: Any) -> Optional[LanePosition]:
        position = str(value).strip().lower()
        if position not in LANE_POSITIONS:
            logger.warning(
                "Invalid lane position: {}. Must be one of: {}", value, ", ".join(LANE_POSITIONS)
            )
            return None
        return position  # type: ignore[return-value]

    @staticmethod
    def _parse_vehicle_count(value: Any) -> Optional[int]:
        count = _to_float(value)
        if count is None or count < 0:
            logger.warning("Invalid vehicle count: {}", value)
            return None
        return int(count)

    @staticmethod
    def _parse_avg_speed(value: Any) -> Optional[float]:
        if _is_blank(value):
            return None
        speed = _to_float(value)
        if speed is None or speed < 0:
            logger.warning("Invalid average speed: {}", value)
            return None
        return speed

    @staticmethod
    def _parse_timestamp(value: Any) -> Optional[datetime]:
        parsed = pd.to_datetime(value, errors="coerce")
        if pd.isna(parsed):
            logger.warning("Invalid timestamp: {}", value)
            return None

        timestamp = parsed.to_pydatetime()
        if timestamp.tzinfo is not None:
            # Hour-of-day grouping works on local wall-clock time.
            timestamp = timestamp.astimezone().replace(tzinfo=None)
        return timestamp


def _location_name(row: dict[str, Any]) -> Optional[str]:
    for column in ("circle", "area"):
        value = row.get(column)
        if not _is_blank(value):
            return str(value)
    return None


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if value is pd.NaT:
        return True
    return isinstance(value, str) and not value.strip()


def _to_float(value: Any) -> Optional[float]:
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


__all__ = ["SpreadsheetTrafficParser"]
