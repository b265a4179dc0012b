"""Sample upload spreadsheets for the import flow."""
from __future__ import annotations

from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Optional

import pandas as pd

from traffic_insights.utils.logger import logger

# (circle, hour, minute, density); the last two rows exercise area mapping.
AREA_SAMPLE_ROWS: tuple[tuple[str, int, int, float], ...] = (
    ("Mysore Palace Area", 8, 30, 72.5),
    ("KRS Road", 8, 45, 85.3),
    ("Gokulam", 11, 0, 38.2),
    ("Vijayanagar", 11, 30, 54.7),
    ("Bannimantap", 13, 0, 61.4),
    ("Saraswathipuram", 15, 30, 28.9),
    ("Kuvempunagar", 16, 0, 32.1),
    ("Jayalakshmipuram", 18, 30, 78.9),
    ("Hebbal", 18, 45, 69.2),
    ("Chamundi Hill Road", 19, 15, 52.3),
    ("Mysore Palace Area", 22, 30, 18.7),
    ("MG Road", 10, 0, 45.0),
    ("Residential Layout", 14, 0, 25.5),
)

# (circle, lane_position, hour, minute, vehicle_count, density, avg_speed)
LANE_SAMPLE_ROWS: tuple[tuple[str, str, int, int, int, float, float], ...] = (
    ("Mysore Palace Area", "lane_1", 8, 30, 45, 72.5, 18.2),
    ("Mysore Palace Area", "lane_2", 8, 30, 38, 65.3, 22.5),
    ("Mysore Palace Area", "lane_3", 8, 30, 52, 78.9, 15.7),
    ("Mysore Palace Area", "lane_4", 8, 30, 41, 68.2, 20.1),
    ("Vijayanagar", "lane_1", 12, 15, 28, 45.7, 25.3),
    ("Vijayanagar", "lane_2", 12, 15, 32, 52.1, 23.8),
    ("Vijayanagar", "lane_3", 12, 15, 25, 41.5, 27.2),
    ("Vijayanagar", "lane_4", 12, 15, 30, 49.8, 24.5),
    ("Bannimantap", "lane_1", 18, 0, 55, 82.3, 12.8),
    ("Bannimantap", "lane_2", 18, 0, 48, 75.6, 15.2),
    ("Bannimantap", "lane_3", 18, 0, 60, 88.9, 10.5),
    ("Bannimantap", "lane_4", 18, 0, 52, 79.2, 14.3),
)


def sample_frame(lane_specific: bool = False, day: Optional[date] = None) -> pd.DataFrame:
    day = day or date.today()
    rows: list[dict[str, Any]] = []

    if lane_specific:
        for circle, position, hour, minute, vehicles, density, speed in LANE_SAMPLE_ROWS:
            rows.append(
                {
                    "circle": circle,
                    "lane_position": position,
                    "timestamp": _stamp(day, hour, minute),
                    "vehicle_count": vehicles,
                    "density": density,
                    "avg_speed": speed,
                }
            )
    else:
        for circle, hour, minute, density in AREA_SAMPLE_ROWS:
            rows.append({"circle": circle, "timestamp": _stamp(day, hour, minute), "density": density})

    return pd.DataFrame(rows)


def write_sample_spreadsheet(
    path: Path, lane_specific: bool = False, day: Optional[date] = None
) -> Path:
    """Write the sample data set as ``.xlsx`` or ``.csv`` depending on the suffix."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    frame = sample_frame(lane_specific=lane_specific, day=day)

    suffix = path.suffix.lower()
    if suffix == ".xlsx":
        sheet = "Lane Traffic Data" if lane_specific else "Traffic Data"
        frame.to_excel(path, sheet_name=sheet, index=False)
    elif suffix == ".csv":
        frame.to_csv(path, index=False)
    else:
        raise ValueError(f"Sample spreadsheets must be .xlsx or .csv, got {path.name}")

    logger.info("Wrote {} sample rows to {}", len(frame), path)
    return path


def _stamp(day: date, hour: int, minute: int) -> str:
    return datetime.combine(day, time(hour, minute)).isoformat()


__all__ = ["AREA_SAMPLE_ROWS", "LANE_SAMPLE_ROWS", "sample_frame", "write_sample_spreadsheet"]
