"""Tests for the keyword area resolver."""
from __future__ import annotations

import pytest

from traffic_insights.infrastructure.geo.area_resolver import (
    DEFAULT_AREA,
    KeywordAreaResolver,
    name_similarity,
)


def test_exact_name_is_capped_at_max_confidence():
    mapping = KeywordAreaResolver().resolve("Gokulam")

    assert mapping.area_name == "Gokulam"
    assert mapping.confidence == 0.95
    assert mapping.reason == "name similarity"


def test_name_containment_scores_point_eight():
    mapping = KeywordAreaResolver().resolve("Vijayanagar 2nd Stage")

    assert mapping.area_name == "Vijayanagar"
    assert mapping.confidence == pytest.approx(0.8)
    assert mapping.reason == "name similarity"


def test_keyword_score_grows_with_keyword_length():
    mapping = KeywordAreaResolver().resolve("near the temple")

    assert mapping.area_name == "Chamundi Hill Road"
    assert mapping.reason == "keyword: temple"
    assert mapping.confidence == pytest.approx(0.7 + 0.2 * 6 / 15)


def test_industrial_names_fall_back_to_industrial_pattern():
    mapping = KeywordAreaResolver().resolve("Whitefield Industrial Area")

    assert mapping.area_name == "Hebbal"
    assert mapping.confidence == pytest.approx(0.6)
    assert mapping.reason == "industrial pattern"


def test_highway_codes_use_highway_pattern():
    mapping = KeywordAreaResolver().resolve("NH-275 bypass")

    assert mapping.area_name == "KRS Road"
    assert mapping.reason == "highway pattern"
    assert mapping.confidence == pytest.approx(0.6)


@pytest.mark.parametrize("text", ["", "   ", "zzqx"])
def test_unknown_input_defaults_to_central_area(text):
    mapping = KeywordAreaResolver().resolve(text)

    assert mapping.input_name == text
    assert mapping.area_name == DEFAULT_AREA
    assert mapping.confidence == pytest.approx(0.4)
    assert mapping.reason == "default central"


def test_resolve_many_keys_by_lowercase_name():
    mappings = KeywordAreaResolver().resolve_many(["Gokulam", "Whitefield Industrial Area"])

    assert set(mappings) == {"gokulam", "whitefield industrial area"}
    assert mappings["whitefield industrial area"].area_name == "Hebbal"


def test_characteristics_fall_back_to_central_profile():
    resolver = KeywordAreaResolver()

    assert resolver.category_for("KRS Road") == "highway"
    assert resolver.category_for("Chamundi Hill Road") == "tourist"
    assert resolver.characteristics("Atlantis") == resolver.characteristics(DEFAULT_AREA)


def test_unknown_default_area_is_rejected():
    with pytest.raises(ValueError):
        KeywordAreaResolver(default_area="Atlantis")


def test_name_similarity_uses_word_overlap():
    assert name_similarity("Palace Road", "palace road") == 1.0
    assert name_similarity("old palace gate", "palace area") == pytest.approx(0.6 * 1 / 3)
    assert name_similarity("north gate", "south road") == 0.0
