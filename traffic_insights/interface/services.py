"""Wire the concrete adapters into the use cases shared by every entry point."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from traffic_insights.infrastructure.geo.area_resolver import KeywordAreaResolver
from traffic_insights.infrastructure.ingestion.spreadsheet import SpreadsheetTrafficParser
from traffic_insights.infrastructure.reports import ForecastReportAnalyzer, ForecastReportRepository
from traffic_insights.infrastructure.storage.catalog import AreaCatalog
from traffic_insights.infrastructure.storage.records import CsvTrafficStore
from traffic_insights.infrastructure.traffic.aggregation import HistoricalAggregator
from traffic_insights.use_cases.analyze_weekly_patterns import AnalyzeWeeklyPatternsUseCase
from traffic_insights.use_cases.current_status import CurrentTrafficStatusUseCase
from traffic_insights.use_cases.forecast_area_traffic import ForecastAreaTrafficUseCase
from traffic_insights.use_cases.forecast_lane_traffic import ForecastLaneTrafficUseCase
from traffic_insights.use_cases.generate_forecast_report import GenerateForecastReportUseCase
from traffic_insights.use_cases.import_traffic_data import ImportTrafficDataUseCase
from traffic_insights.use_cases.recommend_routes import RecommendRoutesUseCase
from traffic_insights.use_cases.summarize_daily_traffic import SummarizeDailyTrafficUseCase
from traffic_insights.utils.config import (
    DEFAULT_HISTORY_DAYS,
    DEFAULT_MAX_WORKERS,
    DEFAULT_WEEKLY_HISTORY_DAYS,
    AppConfig,
    forecasting_setting,
    require_path,
    target_locations,
)
from traffic_insights.utils.logger import logger


@dataclass(frozen=True)
class TrafficServices:
    catalog: AreaCatalog
    store: CsvTrafficStore
    resolver: KeywordAreaResolver
    area_forecast: ForecastAreaTrafficUseCase
    lane_forecast: ForecastLaneTrafficUseCase
    current_status: CurrentTrafficStatusUseCase
    recommend_routes: RecommendRoutesUseCase
    weekly_patterns: AnalyzeWeeklyPatternsUseCase
    daily_summary: SummarizeDailyTrafficUseCase
    import_data: ImportTrafficDataUseCase
    forecast_report: GenerateForecastReportUseCase


def _resolve(path: Path, project_root: Optional[Path]) -> Path:
    if path.is_absolute() or project_root is None:
        return path
    return (project_root / path).resolve()


def create_services(
    config: AppConfig,
    project_root: Optional[Path] = None,
    now_provider: Callable[[], datetime] | None = None,
) -> TrafficServices:
    """Build every use case from ``config``; relative paths resolve against ``project_root``."""
    catalog = AreaCatalog.from_yaml(_resolve(require_path(config, "area_catalog"), project_root))
    store = CsvTrafficStore(
        area_path=_resolve(require_path(config, "traffic_data"), project_root),
        lane_path=_resolve(require_path(config, "lane_traffic_data"), project_root),
    )
    reports_dir = _resolve(require_path(config, "reports_dir"), project_root)

    history_days = forecasting_setting(config, "history_days", DEFAULT_HISTORY_DAYS)
    weekly_days = forecasting_setting(config, "weekly_history_days", DEFAULT_WEEKLY_HISTORY_DAYS)
    max_workers = forecasting_setting(config, "max_workers", DEFAULT_MAX_WORKERS)

    resolver = KeywordAreaResolver()
    aggregator = HistoricalAggregator(store)
    area_forecast = ForecastAreaTrafficUseCase(aggregator, history_days=history_days)
    lane_forecast = ForecastLaneTrafficUseCase(
        aggregator,
        history_days=history_days,
        max_workers=max_workers,
        now_provider=now_provider,
    )
    daily_summary = SummarizeDailyTrafficUseCase(aggregator)

    services = TrafficServices(
        catalog=catalog,
        store=store,
        resolver=resolver,
        area_forecast=area_forecast,
        lane_forecast=lane_forecast,
        current_status=CurrentTrafficStatusUseCase(
            area_forecast, lane_forecast, now_provider=now_provider
        ),
        recommend_routes=RecommendRoutesUseCase(
            catalog,
            resolver,
            area_forecast,
            target_locations=target_locations(config),
            max_workers=max_workers,
            now_provider=now_provider,
        ),
        weekly_patterns=AnalyzeWeeklyPatternsUseCase(
            aggregator, history_days=weekly_days, now_provider=now_provider
        ),
        daily_summary=daily_summary,
        import_data=ImportTrafficDataUseCase(
            SpreadsheetTrafficParser(),
            catalog,
            resolver,
            store,
            summarizer=daily_summary,
            today_provider=(lambda: now_provider().date()) if now_provider else None,
        ),
        forecast_report=GenerateForecastReportUseCase(
            area_forecast,
            ForecastReportAnalyzer(),
            ForecastReportRepository(reports_dir),
        ),
    )
    logger.info("Traffic services ready with {} areas", len(catalog.list_areas()))
    return services


__all__ = ["TrafficServices", "create_services"]
