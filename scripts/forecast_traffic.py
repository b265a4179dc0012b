"""Command-line entry point printing current traffic and the 24-hour forecast for an area."""
from __future__ import annotations

import argparse
from datetime import datetime
from pathlib import Path

from scripts.bootstrap import bootstrap_project

_PROJECT_ROOT = bootstrap_project()

from traffic_insights.core.exceptions import AreaNotFoundError  # noqa: E402
from traffic_insights.interface.services import create_services  # noqa: E402
from traffic_insights.utils.config import (  # noqa: E402
    DEFAULT_TREND_HOURS_AHEAD,
    forecasting_setting,
    load_config,
    logging_settings,
)
from traffic_insights.utils.formatting import format_density, format_hour  # noqa: E402
from traffic_insights.utils.logger import configure_logging, logger  # noqa: E402


def _resolve_path(path: Path) -> Path:
    if path.is_absolute():
        return path
    return (_PROJECT_ROOT / path).resolve()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Show current traffic, the 24-hour forecast and lane trends for an area"
    )
    parser.add_argument("area", help="Area name (partial, case-insensitive)")
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("configs/config.yaml"),
        help="Path to the application configuration file",
    )
    parser.add_argument(
        "--recommendations",
        action="store_true",
        help="Also print route recommendations for the configured locations",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    config = load_config(_resolve_path(args.config))
    configure_logging(*logging_settings(config))
    services = create_services(config, project_root=_PROJECT_ROOT)
    trend_hours = forecasting_setting(config, "trend_hours_ahead", DEFAULT_TREND_HOURS_AHEAD)

    try:
        area = services.catalog.require_area(args.area)
    except AreaNotFoundError as error:
        logger.error("{}", error)
        raise SystemExit(1) from error

    status = services.current_status.for_area(area.id)
    logger.info(
        "{}: {} ({}% density, confidence {:.0%})",
        area.name,
        status.display_level,
        format_density(status.density),
        status.confidence,
    )

    lanes = services.catalog.lanes_for_area(area.id)
    lane_statuses = services.current_status.for_lanes([lane.id for lane in lanes]) if lanes else {}
    for lane in lanes:
        lane_status = lane_statuses.get(lane.id)
        if lane_status is None:
            logger.warning("{}: no forecast available", lane.name)
            continue
        trend = services.lane_forecast.trend(lane.id, hours_ahead=trend_hours)
        logger.info(
            "  {}: {}, ~{} vehicles, trend {}",
            lane.name,
            lane_status.display_level,
            lane_status.vehicle_count,
            trend.trend,
        )

    logger.info("24-hour forecast for {:%Y-%m-%d}:", datetime.now())
    for prediction in services.current_status.forecast_24h(area.id):
        logger.info(
            "  {:>8}  {:<6} {:5.1f}%  confidence {:.2f}",
            format_hour(prediction.hour),
            prediction.predicted_level,
            prediction.predicted_density,
            prediction.confidence,
        )

    if args.recommendations:
        for item in services.recommend_routes.execute():
            alternatives = f" (try {', '.join(item.alternatives)})" if item.alternatives else ""
            logger.info("{}: {} - {}{}", item.location, item.recommendation, item.reason, alternatives)


if __name__ == "__main__":
    main()
