"""Command-line entry point writing the sample upload spreadsheets."""
from __future__ import annotations

import argparse
from pathlib import Path

from scripts.bootstrap import bootstrap_project

_PROJECT_ROOT = bootstrap_project()

from traffic_insights.infrastructure.ingestion.samples import write_sample_spreadsheet  # noqa: E402
from traffic_insights.utils.logger import logger  # noqa: E402


def _resolve_path(path: Path) -> Path:
    if path.is_absolute():
        return path
    return (_PROJECT_ROOT / path).resolve()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Write sample traffic spreadsheets for upload")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("data/samples"),
        help="Directory for the generated files",
    )
    parser.add_argument(
        "--format",
        choices=("xlsx", "csv"),
        default="xlsx",
        help="Spreadsheet format",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    output_dir = _resolve_path(args.output_dir)

    area_path = write_sample_spreadsheet(output_dir / f"mysore_traffic_sample.{args.format}")
    lane_path = write_sample_spreadsheet(
        output_dir / f"mysore_lane_traffic_sample.{args.format}", lane_specific=True
    )
    logger.info("Sample files written: {}, {}", area_path, lane_path)


if __name__ == "__main__":
    main()
