"""Infrastructure helpers for generating forecast reports."""

from .forecast_report import (
    ForecastReportAnalyzer,
    ForecastReportRepository,
    LEVEL_COLORS,
)

__all__ = [
    "ForecastReportAnalyzer",
    "ForecastReportRepository",
    "LEVEL_COLORS",
]
