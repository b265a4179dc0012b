"""Resolve free-text location names to the known Mysore areas."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Pattern

from traffic_insights.core.entities import AreaCategory, AreaMapping
from traffic_insights.utils.logger import logger

MAX_CONFIDENCE = 0.95
FALLBACK_THRESHOLD = 0.3
PATTERN_SCORE = 0.6
DEFAULT_SCORE = 0.4
DEFAULT_AREA = "Mysore Palace Area"

_MULTISPACE_PATTERN = re.compile(r"\s+")


@dataclass(frozen=True)
class AreaProfile:
    """Static characteristics of a known area."""

    category: AreaCategory
    keywords: tuple[str, ...]
    traffic_profile: str


# Industrial terms are matched by the fallback detector only, so that names such
# as "Whitefield Industrial Area" resolve through the industrial pattern.
AREA_PROFILES: Mapping[str, AreaProfile] = {
    "Mysore Palace Area": AreaProfile(
        "central", ("palace", "central", "downtown", "city center", "main", "heritage"), "high-medium"
    ),
    "Gokulam": AreaProfile(
        "residential", ("residential", "north", "layout", "suburb", "neighborhood"), "low-medium"
    ),
    "Jayalakshmipuram": AreaProfile(
        "residential", ("residential", "north", "layout", "suburb", "colony"), "medium"
    ),
    "Vijayanagar": AreaProfile(
        "commercial", ("market", "commercial", "shopping", "business", "east"), "high"
    ),
    "KRS Road": AreaProfile(
        "highway", ("highway", "road", "expressway", "route", "corridor", "south"), "high"
    ),
    "Chamundi Hill Road": AreaProfile(
        "tourist", ("hill", "scenic", "tourist", "religious", "temple", "route"), "medium"
    ),
    "Bannimantap": AreaProfile("mixed", ("central", "residential", "mixed"), "medium"),
    "Kuvempunagar": AreaProfile(
        "residential", ("residential", "west", "layout", "suburb", "quiet"), "low-medium"
    ),
    "Hebbal": AreaProfile(
        "industrial", ("warehouse", "logistics", "east", "business", "commercial"), "medium-high"
    ),
    "Saraswathipuram": AreaProfile(
        "residential", ("residential", "north", "colony", "suburb", "layout"), "low"
    ),
}

FALLBACK_PATTERNS: tuple[tuple[Pattern[str], str, str], ...] = (
    (re.compile(r"highway|expressway|nh-|sh-|route|corridor", re.IGNORECASE), "KRS Road", "highway pattern"),
    (
        re.compile(r"central|downtown|city center|main|mg road|brigade", re.IGNORECASE),
        "Mysore Palace Area",
        "central area pattern",
    ),
    (
        re.compile(r"market|commercial|shopping|mall|business|trade", re.IGNORECASE),
        "Vijayanagar",
        "commercial pattern",
    ),
    (
        re.compile(r"industrial|warehouse|factory|peenya|whitefield", re.IGNORECASE),
        "Hebbal",
        "industrial pattern",
    ),
    (
        re.compile(r"layout|colony|nagar|puram|extension|stage|block", re.IGNORECASE),
        "Gokulam",
        "residential pattern",
    ),
    (
        re.compile(r"temple|hill|park|garden|tourist|monument", re.IGNORECASE),
        "Chamundi Hill Road",
        "tourist pattern",
    ),
)


def name_similarity(first: str, second: str) -> float:
    """Score two names: exact 1.0, containment 0.8, else scaled word overlap."""
    left = first.lower()
    right = second.lower()

    if left == right:
        return 1.0
    if left in right or right in left:
        return 0.8

    left_words = left.split()
    right_words = right.split()
    if not left_words or not right_words:
        return 0.0

    common_words = sum(1 for word in left_words if word in right_words)
    if common_words > 0:
        return 0.6 * (common_words / max(len(left_words), len(right_words)))
    return 0.0


@dataclass
class KeywordAreaResolver:
    """Map arbitrary location text to one of the configured area profiles."""

    profiles: Mapping[str, AreaProfile] = field(default_factory=lambda: dict(AREA_PROFILES))
    fallback_patterns: tuple[tuple[Pattern[str], str, str], ...] = FALLBACK_PATTERNS
    default_area: str = DEFAULT_AREA

    def __post_init__(self) -> None:
        if self.default_area not in self.profiles:
            msg = f"Default area '{self.default_area}' is not one of the configured profiles"
            raise ValueError(msg)

    def resolve(self, text: str) -> AreaMapping:
        normalized = self._normalize(text)
        logger.debug("Resolving area for input: {}", text)

        area, score, reason = self.default_area, 0.0, "default"
        if normalized:
            area, score, reason = self._best_match(normalized)

        if score < FALLBACK_THRESHOLD:
            logger.debug("Best score {:.2f} below threshold; applying pattern fallback", score)
            area, score, reason = self._fallback(normalized)

        mapping = AreaMapping(
            input_name=text,
            area_name=area,
            confidence=min(score, MAX_CONFIDENCE),
            reason=reason,
        )
        logger.debug("Resolved '{}' to {} ({})", text, mapping.area_name, mapping.reason)
        return mapping

    def resolve_many(self, names: Iterable[str]) -> dict[str, AreaMapping]:
        return {name.lower(): self.resolve(name) for name in names}

    def characteristics(self, area_name: str) -> AreaProfile:
        return self.profiles.get(area_name) or self.profiles[self.default_area]

    def category_for(self, area_name: str) -> AreaCategory:
        return self.characteristics(area_name).category

    def _best_match(self, normalized: str) -> tuple[str, float, str]:
        best_area, best_score, best_reason = self.default_area, 0.0, "default"

        for area_name, profile in self.profiles.items():
            score = 0.0
            reason = ""

            similarity = name_similarity(normalized, area_name)
            if similarity > score:
                score = similarity
                reason = "name similarity"

            for keyword in profile.keywords:
                if keyword not in normalized:
                    continue
                keyword_score = 0.7 + (len(keyword) / len(normalized)) * 0.2
                if keyword_score > score:
                    score = keyword_score
                    reason = f"keyword: {keyword}"

            if score > best_score:
                best_area, best_score, best_reason = area_name, score, reason

        return best_area, best_score, best_reason

    def _fallback(self, normalized: str) -> tuple[str, float, str]:
        for pattern, area_name, reason in self.fallback_patterns:
            if pattern.search(normalized):
                return area_name, PATTERN_SCORE, reason
        return self.default_area, DEFAULT_SCORE, "default central"

    @staticmethod
    def _normalize(text: str) -> str:
        return _MULTISPACE_PATTERN.sub(" ", (text or "").lower()).strip()


__all__ = [
    "AREA_PROFILES",
    "AreaProfile",
    "DEFAULT_AREA",
    "FALLBACK_PATTERNS",
    "KeywordAreaResolver",
    "name_similarity",
]
