"""Heuristic traffic level classification for raw density readings."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from traffic_insights.core.entities import TrafficLevel
from traffic_insights.infrastructure.traffic.patterns import (
    LOW_THRESHOLD,
    MAX_DENSITY,
    MEDIUM_THRESHOLD,
    MIN_DENSITY,
    WEEKEND_FACTOR,
    category_factor,
    is_weekend,
    time_of_day_factor,
)
from traffic_insights.utils.logger import logger
from traffic_insights.utils.numeric import clamp


def level_from_density(density: float) -> TrafficLevel:
    """Apply the fixed thresholds to an already adjusted density."""
    if density < LOW_THRESHOLD:
        return "low"
    if density < MEDIUM_THRESHOLD:
        return "medium"
    return "high"


class TrafficLevelClassifier:
    """Classify a single density reading with time and area context."""

    def adjusted_score(
        self,
        density_score: float,
        timestamp: Optional[datetime] = None,
        area_category: Optional[str] = None,
    ) -> float:
        score = float(density_score)
        weekend = False

        if timestamp is not None:
            score *= time_of_day_factor(timestamp.hour)
            weekend = is_weekend(timestamp)
            if weekend:
                score *= WEEKEND_FACTOR

        score *= category_factor(area_category, weekend)
        return clamp(score, MIN_DENSITY, MAX_DENSITY)

    def classify(
        self,
        density_score: float,
        timestamp: Optional[datetime] = None,
        area_category: Optional[str] = None,
    ) -> TrafficLevel:
        adjusted = self.adjusted_score(density_score, timestamp, area_category)
        level = level_from_density(adjusted)
        logger.debug(
            "Classified density {} (adjusted {:.2f}, category {}) as {}",
            density_score,
            adjusted,
            area_category,
            level,
        )
        return level


__all__ = ["TrafficLevelClassifier", "level_from_density"]
