"""Use case orchestrating forecast report generation for an area."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, Protocol, Sequence

from matplotlib.figure import Figure

from traffic_insights.core.entities import Area, HourlyPrediction
from traffic_insights.utils.logger import logger


class AreaForecaster(Protocol):
    def execute(self, area_id: str, target_date: datetime) -> list[HourlyPrediction]:
        ...


class ReportAnalyzer(Protocol):
    def compute_metrics(self, predictions: Sequence[HourlyPrediction]) -> Mapping[str, Any]:
        ...

    def build_figures(
        self, predictions: Sequence[HourlyPrediction], title: str = ...
    ) -> Mapping[str, Figure]:
        ...


class ReportRepository(Protocol):
    def save_metrics(self, name: str, metrics: Mapping[str, Any]) -> Path:
        ...

    def save_figures(self, name: str, figures: Mapping[str, Figure]) -> Mapping[str, Path]:
        ...


@dataclass(frozen=True)
class GeneratedForecastReport:
    metrics: Mapping[str, Any]
    metrics_path: Path
    figure_paths: Mapping[str, Path]


class GenerateForecastReportUseCase:
    """Forecast an area, summarise the forecast and persist the artefacts."""

    def __init__(
        self,
        forecaster: AreaForecaster,
        analyzer: ReportAnalyzer,
        repository: ReportRepository,
    ) -> None:
        self._forecaster = forecaster
        self._analyzer = analyzer
        self._repository = repository

    def execute(self, area: Area, target_date: datetime) -> GeneratedForecastReport:
        predictions = self._forecaster.execute(area.id, target_date)
        if not predictions:
            raise ValueError(f"Forecast for {area.name} is empty; nothing to report")

        metrics = {
            "area_id": area.id,
            "area_name": area.name,
            "target_date": target_date.date().isoformat(),
            **self._analyzer.compute_metrics(predictions),
        }
        figures = self._analyzer.build_figures(
            predictions, title=f"{area.name}: forecast for {target_date:%Y-%m-%d}"
        )

        report_name = f"{area.name}_{target_date:%Y%m%d}"
        metrics_path = self._repository.save_metrics(report_name, metrics)
        figure_paths = self._repository.save_figures(report_name, figures)
        logger.info("Forecast report for {} saved to {}", area.name, metrics_path)

        return GeneratedForecastReport(
            metrics=metrics,
            metrics_path=metrics_path,
            figure_paths=figure_paths,
        )


__all__ = [
    "AreaForecaster",
    "GenerateForecastReportUseCase",
    "GeneratedForecastReport",
    "ReportAnalyzer",
    "ReportRepository",
]
