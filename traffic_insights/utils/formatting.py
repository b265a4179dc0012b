"""Display helpers for hours and percentages."""
from __future__ import annotations


def format_hour(hour: int) -> str:
    """Render a 0-23 hour as a 12-hour clock label such as ``"5:00 PM"``."""
    period = "PM" if hour >= 12 else "AM"
    if hour == 0:
        display_hour = 12
    elif hour > 12:
        display_hour = hour - 12
    else:
        display_hour = hour
    return f"{display_hour}:00 {period}"


def format_clock_hour(hour: int) -> str:
    return f"{hour:02d}:00"


def format_density(density: float) -> str:
    """Drop a trailing ``.0`` so 65.0 renders as ``65`` and 72.5 stays ``72.5``."""
    return f"{density:g}"


__all__ = ["format_clock_hour", "format_density", "format_hour"]
