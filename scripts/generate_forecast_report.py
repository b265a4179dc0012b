"""Command-line entry point generating forecast reports for one or all areas."""
from __future__ import annotations

import argparse
from datetime import datetime
from pathlib import Path

from scripts.bootstrap import bootstrap_project

_PROJECT_ROOT = bootstrap_project()

from traffic_insights.interface.services import create_services  # noqa: E402
from traffic_insights.utils.config import load_config, logging_settings  # noqa: E402
from traffic_insights.utils.logger import configure_logging, logger  # noqa: E402


def _resolve_path(path: Path) -> Path:
    if path.is_absolute():
        return path
    return (_PROJECT_ROOT / path).resolve()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate forecast metrics (JSON) and density charts (PNG) per area"
    )
    parser.add_argument(
        "--area",
        help="Area name (partial match); every catalog area when omitted",
    )
    parser.add_argument(
        "--date",
        type=datetime.fromisoformat,
        default=None,
        help="Target date/time in ISO format (defaults to now)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("configs/config.yaml"),
        help="Path to the application configuration file",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    config = load_config(_resolve_path(args.config))
    configure_logging(*logging_settings(config))
    services = create_services(config, project_root=_PROJECT_ROOT)

    target_date = args.date or datetime.now()
    areas = [services.catalog.require_area(args.area)] if args.area else services.catalog.list_areas()

    for area in areas:
        report = services.forecast_report.execute(area, target_date)
        logger.info("Metrics for {} saved to {}", area.name, report.metrics_path)
        for name, path in report.figure_paths.items():
            logger.info("Figure '{}' saved to {}", name, path)


if __name__ == "__main__":
    main()
