"""Use case importing an uploaded spreadsheet into the record store."""
from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Callable, Iterable, Optional, Protocol

from traffic_insights.core.entities import (
    Area,
    AreaMapping,
    DailyTrafficSummary,
    ImportReport,
    Lane,
    LanePosition,
    LaneTrafficRecord,
    ParsedLaneTrafficRecord,
    ParsedTrafficRecord,
    TrafficRecord,
)
from traffic_insights.utils.logger import logger


class SpreadsheetParser(Protocol):
    def parse_area_records(self, path: Path) -> list[ParsedTrafficRecord]:
        ...

    def parse_lane_records(self, path: Path) -> list[ParsedLaneTrafficRecord]:
        ...


class AreaLookup(Protocol):
    def find_exact(self, name: str) -> Optional[Area]:
        ...

    def lane_at(self, area_id: str, position: LanePosition) -> Optional[Lane]:
        ...


class AreaMapper(Protocol):
    def resolve(self, text: str) -> AreaMapping:
        ...


class RecordSink(Protocol):
    def append_area_records(self, records: Iterable[TrafficRecord]) -> int:
        ...

    def append_lane_records(self, records: Iterable[LaneTrafficRecord]) -> int:
        ...


class DailySummarizer(Protocol):
    def execute(self, area_id: str, day: date) -> Optional[DailyTrafficSummary]:
        ...


def mapping_message(mapping: AreaMapping) -> str:
    percent = int(mapping.confidence * 100 + 0.5)
    return f'Mapped "{mapping.input_name}" → "{mapping.area_name}" ({percent}% confidence)'


class ImportTrafficDataUseCase:
    """Resolve uploaded rows to catalog areas/lanes and append them."""

    def __init__(
        self,
        parser: SpreadsheetParser,
        catalog: AreaLookup,
        mapper: AreaMapper,
        sink: RecordSink,
        summarizer: DailySummarizer | None = None,
        today_provider: Callable[[], date] | None = None,
    ) -> None:
        self._parser = parser
        self._catalog = catalog
        self._mapper = mapper
        self._sink = sink
        self._summarizer = summarizer
        self._today = today_provider or date.today

    def execute(self, path: Path, lane_specific: bool = False) -> ImportReport:
        if lane_specific:
            return self.import_lane_records(path)
        return self.import_area_records(path)

    def import_area_records(self, path: Path) -> ImportReport:
        parsed = self._parser.parse_area_records(path)
        mapping_log: list[str] = []
        records: list[TrafficRecord] = []

        for row in parsed:
            area = self._resolve_area(row.area_name, mapping_log)
            if area is None:
                continue
            records.append(
                TrafficRecord(
                    area_id=area.id,
                    timestamp=row.timestamp,
                    density_score=row.density_score,
                    traffic_level=row.traffic_level,
                )
            )

        imported = self._sink.append_area_records(records) if records else 0
        touched = list(dict.fromkeys(record.area_id for record in records))
        return self._report(len(parsed), imported, mapping_log, touched)

    def import_lane_records(self, path: Path) -> ImportReport:
        parsed = self._parser.parse_lane_records(path)
        mapping_log: list[str] = []
        records: list[LaneTrafficRecord] = []
        touched: list[str] = []

        for row in parsed:
            area = self._resolve_area(row.area_name, mapping_log)
            if area is None:
                continue
            lane = self._catalog.lane_at(area.id, row.lane_position)
            if lane is None:
                logger.warning("Lane {} not found for area {}", row.lane_position, area.name)
                continue

            records.append(
                LaneTrafficRecord(
                    lane_id=lane.id,
                    timestamp=row.timestamp,
                    vehicle_count=row.vehicle_count,
                    density_score=row.density_score,
                    traffic_level=row.traffic_level,
                    avg_speed=row.avg_speed,
                )
            )
            if area.id not in touched:
                touched.append(area.id)

        imported = self._sink.append_lane_records(records) if records else 0
        return self._report(len(parsed), imported, mapping_log, touched)

    def _resolve_area(self, name: str, mapping_log: list[str]) -> Optional[Area]:
        area = self._catalog.find_exact(name)
        if area is not None:
            return area

        mapping = self._mapper.resolve(name)
        area = self._catalog.find_exact(mapping.area_name)
        if area is None:
            logger.warning("Area not found even after mapping: {}", name)
            return None

        message = mapping_message(mapping)
        if message not in mapping_log:
            mapping_log.append(message)
            logger.info("{}", message)
        return area

    def _report(
        self, parsed_count: int, imported: int, mapping_log: list[str], area_ids: list[str]
    ) -> ImportReport:
        summaries: list[DailyTrafficSummary] = []
        if self._summarizer is not None and imported:
            today = self._today()
            for area_id in area_ids:
                summary = self._summarizer.execute(area_id, today)
                if summary is not None:
                    summaries.append(summary)

        report = ImportReport(
            imported=imported,
            skipped=parsed_count - imported,
            mappings=tuple(mapping_log),
            summaries=tuple(summaries),
        )
        logger.info(
            "Imported {} records ({} skipped, {} area mappings)",
            report.imported,
            report.skipped,
            len(report.mappings),
        )
        return report


__all__ = [
    "AreaLookup",
    "AreaMapper",
    "DailySummarizer",
    "ImportTrafficDataUseCase",
    "RecordSink",
    "SpreadsheetParser",
    "mapping_message",
]
