"""Command-line entry point importing a traffic spreadsheet into the record store."""
from __future__ import annotations

import argparse
from pathlib import Path

from scripts.bootstrap import bootstrap_project

_PROJECT_ROOT = bootstrap_project()

from traffic_insights.core.exceptions import InvalidSpreadsheetError  # noqa: E402
from traffic_insights.interface.services import create_services  # noqa: E402
from traffic_insights.utils.config import load_config, logging_settings  # noqa: E402
from traffic_insights.utils.logger import configure_logging, logger  # noqa: E402


def _resolve_path(path: Path) -> Path:
    if path.is_absolute():
        return path
    return (_PROJECT_ROOT / path).resolve()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Import an .xlsx/.xls/.csv traffic spreadsheet into the local record store"
    )
    parser.add_argument("spreadsheet", type=Path, help="Spreadsheet to import")
    parser.add_argument(
        "--lanes",
        action="store_true",
        help="The sheet holds lane-specific rows (lane_position, vehicle_count)",
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

    try:
        report = services.import_data.execute(args.spreadsheet, lane_specific=args.lanes)
    except (InvalidSpreadsheetError, FileNotFoundError) as error:
        logger.error("Import failed: {}", error)
        raise SystemExit(1) from error

    logger.info("Imported {} records, skipped {}", report.imported, report.skipped)
    for message in report.mappings:
        logger.info("{}", message)
    for summary in report.summaries:
        logger.info(
            "Area {}: {} records on {}, busiest {}, quietest {}, average density {:.1f}",
            summary.area_id,
            summary.total_records,
            summary.analysis_date,
            summary.busiest_time,
            summary.quietest_time,
            summary.avg_density,
        )


if __name__ == "__main__":
    main()
