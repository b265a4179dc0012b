"""Core entities for the circle traffic forecasting domain."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal, Optional

TrafficLevel = Literal["low", "medium", "high"]
DisplayLevel = Literal["clear", "moderate", "heavy"]
LanePosition = Literal["lane_1", "lane_2", "lane_3", "lane_4"]
AreaCategory = Literal[
    "central", "residential", "commercial", "highway", "tourist", "industrial", "mixed"
]
TrendDirection = Literal["increasing", "decreasing", "stable"]
RecommendationVerdict = Literal["avoid", "proceed", "ideal"]

LANE_POSITIONS: tuple[LanePosition, ...] = ("lane_1", "lane_2", "lane_3", "lane_4")
DISPLAY_LEVELS: dict[TrafficLevel, DisplayLevel] = {
    "low": "clear",
    "medium": "moderate",
    "high": "heavy",
}


@dataclass(frozen=True)
class Area:
    """A monitored location; circles carry up to four entry lanes."""

    id: str
    name: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    region: Optional[str] = None
    is_circle: bool = False
    lane_count: Optional[int] = None


@dataclass(frozen=True)
class Lane:
    """An entry lane of a circle."""

    id: str
    area_id: str
    position: LanePosition
    name: str
    direction: Optional[str] = None
    max_capacity: Optional[int] = None


@dataclass(frozen=True)
class TrafficRecord:
    """Historical density reading for an area."""

    area_id: str
    timestamp: datetime
    density_score: float
    traffic_level: TrafficLevel


@dataclass(frozen=True)
class LaneTrafficRecord:
    """Historical reading for a single lane."""

    lane_id: str
    timestamp: datetime
    vehicle_count: int
    density_score: float
    traffic_level: TrafficLevel
    avg_speed: Optional[float] = None


@dataclass(frozen=True)
class HourlyStatistics:
    """Sample statistics for one hour-of-day (or weekday) bucket."""

    key: int
    sample_count: int
    mean_density: float
    variance: float
    mean_vehicle_count: Optional[float] = None


@dataclass(frozen=True)
class HourlyPrediction:
    hour: int
    predicted_level: TrafficLevel
    predicted_density: float
    confidence: float


@dataclass(frozen=True)
class LaneHourlyPrediction(HourlyPrediction):
    predicted_vehicle_count: int


@dataclass(frozen=True)
class AreaMapping:
    """Outcome of resolving a free-text location to a known area."""

    input_name: str
    area_name: str
    confidence: float
    reason: str


@dataclass(frozen=True)
class CurrentTrafficStatus:
    level: TrafficLevel
    display_level: DisplayLevel
    density: float
    confidence: float
    vehicle_count: Optional[int] = None


@dataclass(frozen=True)
class CongestionTrend:
    trend: TrendDirection
    predictions: tuple[HourlyPrediction, ...]


@dataclass(frozen=True)
class RouteRecommendation:
    """Verdict for a single target location."""

    location: str
    area_id: str
    current_level: TrafficLevel
    predicted_level: TrafficLevel
    recommendation: RecommendationVerdict
    reason: str
    alternatives: tuple[str, ...] = ()


@dataclass(frozen=True)
class WeeklyPattern:
    """Average traffic for one day of the week.

    ``day_index`` follows ``datetime.weekday()``: Monday is 0 and Sunday is 6.
    """

    day: str
    day_index: int
    avg_density: float
    peak_hour: int
    level: TrafficLevel


@dataclass(frozen=True)
class PeakHour:
    hour: int
    density: float


@dataclass(frozen=True)
class DailyTrafficSummary:
    """Per-day analytics for an area, ordered busiest hour first."""

    area_id: str
    analysis_date: date
    peak_hours: tuple[PeakHour, ...]
    avg_density: float
    busiest_time: Optional[str]
    quietest_time: Optional[str]
    total_records: int


@dataclass(frozen=True)
class ParsedTrafficRecord:
    """Validated spreadsheet row, still keyed by the uploaded area name."""

    area_name: str
    timestamp: datetime
    density_score: float
    traffic_level: TrafficLevel


@dataclass(frozen=True)
class ParsedLaneTrafficRecord:
    area_name: str
    lane_position: LanePosition
    timestamp: datetime
    vehicle_count: int
    density_score: float
    traffic_level: TrafficLevel
    avg_speed: Optional[float] = None


@dataclass(frozen=True)
class ImportReport:
    """Result of importing an uploaded spreadsheet into the record store."""

    imported: int
    skipped: int
    mappings: tuple[str, ...] = ()
    summaries: tuple[DailyTrafficSummary, ...] = ()


__all__ = [
    "Area",
    "AreaCategory",
    "AreaMapping",
    "CongestionTrend",
    "CurrentTrafficStatus",
    "DISPLAY_LEVELS",
    "DailyTrafficSummary",
    "DisplayLevel",
    "HourlyPrediction",
    "HourlyStatistics",
    "ImportReport",
    "LANE_POSITIONS",
    "Lane",
    "LaneHourlyPrediction",
    "LanePosition",
    "LaneTrafficRecord",
    "ParsedLaneTrafficRecord",
    "ParsedTrafficRecord",
    "PeakHour",
    "RecommendationVerdict",
    "RouteRecommendation",
    "TrafficLevel",
    "TrafficRecord",
    "TrendDirection",
    "WeeklyPattern",
]
