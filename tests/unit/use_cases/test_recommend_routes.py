"""Tests for the RecommendRoutesUseCase."""
from __future__ import annotations

from datetime import datetime

import pytest

from traffic_insights.core.entities import Area, HourlyPrediction
from traffic_insights.infrastructure.geo.area_resolver import KeywordAreaResolver
from traffic_insights.use_cases.recommend_routes import RecommendRoutesUseCase

EVENING = datetime(2024, 5, 15, 17, 30)
TARGETS = ("Mysore Palace Area", "KRS Road", "Gokulam", "LIC Circle", "Whitefield Industrial Area")


class StubForecaster:
    def __init__(self, slots: dict[str, dict[int, tuple[str, float]]], failing: set[str] | None = None) -> None:
        self.slots = slots
        self.failing = failing or set()

    def execute(self, area_id, target_date):
        if area_id in self.failing:
            raise RuntimeError("history unavailable")
        overrides = self.slots.get(area_id, {})
        return [
            HourlyPrediction(hour, *overrides.get(hour, ("medium", 45.0)), confidence=0.3)  # type: ignore[misc]
            for hour in range(24)
        ]


class EmptyDirectory:
    def __init__(self, areas: list[Area]) -> None:
        self.areas = areas

    def find_by_name(self, name):
        return None

    def list_areas(self):
        return self.areas


def _forecaster() -> StubForecaster:
    return StubForecaster(
        {
            "palace": {17: ("high", 80.0)},
            "krs": {17: ("low", 20.5)},
            "gokulam": {17: ("medium", 50.0), 18: ("high", 70.0)},
        },
        failing={"hebbal"},
    )


def test_recommendations_follow_current_and_next_hour(catalog):
    use_case = RecommendRoutesUseCase(catalog, KeywordAreaResolver(), _forecaster(), target_locations=TARGETS)

    recommendations = {item.area_id: item for item in use_case.execute(EVENING)}

    assert list(recommendations) == ["palace", "krs", "gokulam", "lic"]

    palace = recommendations["palace"]
    assert palace.recommendation == "avoid"
    assert palace.reason == "Heavy traffic expected (80% density)"
    assert palace.alternatives == ("Gokulam", "LIC Circle")

    krs = recommendations["krs"]
    assert krs.recommendation == "ideal"
    assert krs.reason == "Clear roads (20.5% density)"
    assert krs.alternatives == ()

    gokulam = recommendations["gokulam"]
    assert gokulam.recommendation == "proceed"
    assert gokulam.predicted_level == "high"
    assert gokulam.reason == "Moderate now, but expect heavy traffic in 1 hour"

    assert recommendations["lic"].reason == "Moderate traffic (45% density)"


def test_unknown_names_are_mapped_before_forecasting(catalog):
    forecaster = StubForecaster({"hebbal": {17: ("low", 10.0)}})
    use_case = RecommendRoutesUseCase(
        catalog, KeywordAreaResolver(), forecaster, target_locations=("Whitefield Industrial Area",)
    )

    [recommendation] = use_case.execute(EVENING)

    assert recommendation.area_id == "hebbal"
    assert recommendation.location == "Whitefield Industrial Area"


def test_falls_back_to_circles_when_nothing_resolves():
    areas = [
        Area(id="gokulam", name="Gokulam"),
        Area(id="lic", name="LIC Circle", is_circle=True),
        Area(id="palace", name="Mysore Palace Area", is_circle=True),
    ]
    use_case = RecommendRoutesUseCase(EmptyDirectory(areas), KeywordAreaResolver(), StubForecaster({}))

    recommendations = use_case.execute(EVENING)

    assert [item.location for item in recommendations] == ["LIC Circle", "Mysore Palace Area"]


def test_falls_back_to_all_areas_without_circles():
    areas = [
        Area(id="krs", name="KRS Road"),
        Area(id="gokulam", name="Gokulam"),
        Area(id="hebbal", name="Hebbal"),
    ]
    use_case = RecommendRoutesUseCase(EmptyDirectory(areas), KeywordAreaResolver(), StubForecaster({}))

    recommendations = use_case.execute(EVENING)

    assert [item.location for item in recommendations] == ["KRS Road", "Gokulam", "Hebbal"]
    assert [item.area_id for item in recommendations] == ["krs", "gokulam", "hebbal"]


def test_next_hour_wraps_past_midnight(catalog):
    forecaster = StubForecaster({"gokulam": {23: ("medium", 40.0), 0: ("high", 70.0)}})
    use_case = RecommendRoutesUseCase(
        catalog, KeywordAreaResolver(), forecaster, target_locations=("Gokulam",)
    )

    [recommendation] = use_case.execute(datetime(2024, 5, 15, 23, 15))

    assert recommendation.predicted_level == "high"
    assert recommendation.recommendation == "proceed"


def test_uses_injected_clock_without_target_time(catalog):
    use_case = RecommendRoutesUseCase(
        catalog,
        KeywordAreaResolver(),
        _forecaster(),
        target_locations=("KRS Road",),
        now_provider=lambda: EVENING,
    )

    [recommendation] = use_case.execute()

    assert recommendation.recommendation == "ideal"


def test_invalid_worker_count():
    with pytest.raises(ValueError):
        RecommendRoutesUseCase(EmptyDirectory([]), KeywordAreaResolver(), StubForecaster({}), max_workers=0)
