"""Small numeric helpers shared by the forecasting code."""
from __future__ import annotations

import math


def round_half_up(value: float, digits: int = 0) -> float:
    """Round ``value`` with ties away from zero for positives (2.25 -> 2.3)."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(value, upper))


__all__ = ["clamp", "round_half_up"]
