"""Pytest configuration for the project."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from traffic_insights.core.entities import Area, Lane  # noqa: E402
from traffic_insights.infrastructure.storage.catalog import AreaCatalog  # noqa: E402
from traffic_insights.infrastructure.storage.records import InMemoryTrafficStore  # noqa: E402


@pytest.fixture
def catalog() -> AreaCatalog:
    areas = [
        Area(id="palace", name="Mysore Palace Area", is_circle=True, lane_count=4),
        Area(id="krs", name="KRS Road"),
        Area(id="gokulam", name="Gokulam"),
        Area(id="vijayanagar", name="Vijayanagar"),
        Area(id="hebbal", name="Hebbal"),
        Area(id="lic", name="LIC Circle", is_circle=True, lane_count=2),
    ]
    lanes = [
        Lane(id=f"palace-lane_{index}", area_id="palace", position=f"lane_{index}", name=f"Palace {index}")  # type: ignore[arg-type]
        for index in range(1, 5)
    ] + [
        Lane(id="lic-lane_1", area_id="lic", position="lane_1", name="LIC North"),
        Lane(id="lic-lane_2", area_id="lic", position="lane_2", name="LIC East"),
    ]
    return AreaCatalog(areas, lanes)


@pytest.fixture
def store() -> InMemoryTrafficStore:
    return InMemoryTrafficStore()
