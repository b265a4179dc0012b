"""Integration test for the import, forecast and report pipeline."""
from __future__ import annotations

from datetime import date, datetime
from pathlib import Path

import pytest
import yaml

pytest.importorskip("matplotlib")
pytest.importorskip("openpyxl")

from traffic_insights.infrastructure.ingestion.samples import write_sample_spreadsheet
from traffic_insights.interface.services import create_services
from traffic_insights.utils.config import load_config

ROOT = Path(__file__).resolve().parents[2]
NOW = datetime(2024, 5, 15, 8, 45)


@pytest.fixture
def services(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        yaml.safe_dump(
            {
                "paths": {
                    "area_catalog": str(ROOT / "configs" / "areas.yaml"),
                    "traffic_data": "data/traffic_records.csv",
                    "lane_traffic_data": "data/lane_traffic_records.csv",
                    "reports_dir": "reports",
                },
                "forecasting": {"history_days": 30, "max_workers": 2},
            }
        ),
        encoding="utf-8",
    )
    return create_services(load_config(config_path), project_root=tmp_path, now_provider=lambda: NOW)


def test_full_pipeline(services, tmp_path):
    area_sheet = write_sample_spreadsheet(tmp_path / "upload.xlsx", day=date(2024, 5, 15))
    lane_sheet = write_sample_spreadsheet(tmp_path / "lanes.csv", lane_specific=True, day=date(2024, 5, 15))

    report = services.import_data.execute(area_sheet)
    assert (report.imported, report.skipped) == (13, 0)
    assert len(report.mappings) == 2
    assert len(report.summaries) == 10
    assert (tmp_path / "data" / "traffic_records.csv").exists()

    lane_report = services.import_data.execute(lane_sheet, lane_specific=True)
    assert (lane_report.imported, lane_report.skipped) == (12, 0)

    palace = services.catalog.require_area("Mysore Palace Area")
    status = services.current_status.for_area(palace.id)
    assert (status.level, status.display_level) == ("high", "heavy")
    assert status.density == 72.5
    assert status.confidence == 0.32

    lane_ids = [lane.id for lane in services.catalog.lanes_for_area(palace.id)]
    lane_statuses = services.current_status.for_lanes(lane_ids)
    assert set(lane_statuses) == set(lane_ids)
    north = lane_statuses[f"{palace.id}-lane_1"]
    assert north.level == "high"
    assert north.vehicle_count == 59
    assert north.density == pytest.approx(94.25, abs=0.06)

    wednesday = services.weekly_patterns.execute(palace.id)[2]
    assert (wednesday.avg_density, wednesday.peak_hour, wednesday.level) == (72.5, 8, "high")

    recommendations = services.recommend_routes.execute()
    assert len(recommendations) == 5
    assert {item.recommendation for item in recommendations} == {"avoid"}
    assert all(len(item.alternatives) == 2 for item in recommendations)

    generated = services.forecast_report.execute(palace, NOW)
    assert generated.metrics["peak_hour"]["hour"] == 7
    assert generated.metrics["peak_hour"]["density"] == 75.0
    assert generated.metrics_path.exists()
    assert all(path.exists() for path in generated.figure_paths.values())
