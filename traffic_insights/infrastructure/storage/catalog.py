"""Read-only catalog of areas and their lanes."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Sequence

import yaml

from traffic_insights.core.entities import LANE_POSITIONS, Area, Lane, LanePosition
from traffic_insights.core.exceptions import AreaNotFoundError, LaneNotFoundError
from traffic_insights.utils.logger import logger


class AreaCatalog:
    """In-memory view of the administratively seeded areas and lanes."""

    def __init__(self, areas: Sequence[Area], lanes: Sequence[Lane] = ()) -> None:
        self._areas: dict[str, Area] = {}
        for area in areas:
            if area.id in self._areas:
                raise ValueError(f"Duplicate area id in catalog: {area.id}")
            self._areas[area.id] = area

        self._lanes: dict[str, Lane] = {}
        for lane in lanes:
            if lane.area_id not in self._areas:
                raise ValueError(f"Lane {lane.id} references unknown area {lane.area_id}")
            if lane.id in self._lanes:
                raise ValueError(f"Duplicate lane id in catalog: {lane.id}")
            self._lanes[lane.id] = lane

    @classmethod
    def from_yaml(cls, path: Path) -> "AreaCatalog":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Area catalog not found: {path}")

        with path.open("r", encoding="utf-8") as file:
            data = yaml.safe_load(file)

        if not isinstance(data, dict) or not isinstance(data.get("areas"), list):
            raise ValueError("The area catalog must contain a top-level 'areas' list.")

        catalog = cls.from_config(data["areas"])
        logger.info(
            "Loaded {} areas and {} lanes from {}",
            len(catalog._areas),
            len(catalog._lanes),
            path,
        )
        return catalog

    @classmethod
    def from_config(cls, entries: Iterable[Mapping[str, Any]]) -> "AreaCatalog":
        areas: list[Area] = []
        lanes: list[Lane] = []
        for entry in entries:
            area_id = str(entry.get("id") or "").strip()
            name = str(entry.get("name") or "").strip()
            if not area_id or not name:
                raise ValueError("Each catalog area must define a non-empty 'id' and 'name'.")

            lane_entries = entry.get("lanes") or []
            area_lanes = [cls._lane_from_config(area_id, lane) for lane in lane_entries]
            lane_count = entry.get("lane_count")
            areas.append(
                Area(
                    id=area_id,
                    name=name,
                    latitude=_optional_float(entry.get("latitude")),
                    longitude=_optional_float(entry.get("longitude")),
                    region=entry.get("region"),
                    is_circle=bool(entry.get("is_circle", False)),
                    lane_count=int(lane_count) if lane_count is not None else (len(area_lanes) or None),
                )
            )
            lanes.extend(area_lanes)
        return cls(areas, lanes)

    @staticmethod
    def _lane_from_config(area_id: str, entry: Mapping[str, Any]) -> Lane:
        position = str(entry.get("position") or "").strip().lower()
        if position not in LANE_POSITIONS:
            raise ValueError(
                f"Invalid lane position '{position}' for area {area_id}; "
                f"expected one of {', '.join(LANE_POSITIONS)}"
            )
        lane_id = str(entry.get("id") or f"{area_id}-{position}")
        max_capacity = entry.get("max_capacity")
        return Lane(
            id=lane_id,
            area_id=area_id,
            position=position,  # type: ignore[arg-type]
            name=str(entry.get("name") or position),
            direction=entry.get("direction"),
            max_capacity=int(max_capacity) if max_capacity is not None else None,
        )

    def list_areas(self) -> list[Area]:
        return sorted(self._areas.values(), key=lambda area: area.name)

    def circles(self) -> list[Area]:
        return [area for area in self.list_areas() if area.is_circle]

    def get_area(self, area_id: str) -> Optional[Area]:
        return self._areas.get(area_id)

    def find_by_name(self, name: str) -> Optional[Area]:
        """Case-insensitive partial match; the alphabetically first hit wins."""
        needle = name.strip().lower()
        if not needle:
            return None
        for area in self.list_areas():
            if needle in area.name.lower():
                return area
        return None

    def find_exact(self, name: str) -> Optional[Area]:
        needle = name.strip().lower()
        for area in self._areas.values():
            if area.name.lower() == needle:
                return area
        return None

    def require_area(self, name: str) -> Area:
        area = self.find_by_name(name)
        if area is None:
            raise AreaNotFoundError(name)
        return area

    def lanes_for_area(self, area_id: str) -> list[Lane]:
        lanes = [lane for lane in self._lanes.values() if lane.area_id == area_id]
        return sorted(lanes, key=lambda lane: LANE_POSITIONS.index(lane.position))

    def get_lane(self, lane_id: str) -> Lane:
        try:
            return self._lanes[lane_id]
        except KeyError as error:
            raise LaneNotFoundError(f"Unknown lane id: {lane_id}") from error

    def lane_at(self, area_id: str, position: LanePosition) -> Optional[Lane]:
        for lane in self.lanes_for_area(area_id):
            if lane.position == position:
                return lane
        return None


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


__all__ = ["AreaCatalog"]
