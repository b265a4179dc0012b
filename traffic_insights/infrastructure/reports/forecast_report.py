"""Concrete implementations for forecast report artefacts."""
from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Mapping, Sequence

import matplotlib

matplotlib.use("Agg", force=True)
import matplotlib.pyplot as plt
import pandas as pd
from matplotlib.figure import Figure

from traffic_insights.core.entities import HourlyPrediction
from traffic_insights.utils.formatting import format_hour
from traffic_insights.utils.numeric import round_half_up

LEVEL_COLORS: Mapping[str, str] = {
    "low": "#2ca02c",
    "medium": "#ff7f0e",
    "high": "#d62728",
}
LEVEL_ORDER = ("low", "medium", "high")

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def _to_frame(predictions: Sequence[HourlyPrediction]) -> pd.DataFrame:
    frame = pd.DataFrame(
        [
            {
                "hour": prediction.hour,
                "level": prediction.predicted_level,
                "density": prediction.predicted_density,
                "confidence": prediction.confidence,
            }
            for prediction in predictions
        ],
        columns=["hour", "level", "density", "confidence"],
    )
    return frame.sort_values("hour").reset_index(drop=True)


class ForecastReportAnalyzer:
    """Summarise a 24-hour forecast and draw its density profile."""

    def compute_metrics(self, predictions: Sequence[HourlyPrediction]) -> Mapping[str, Any]:
        frame = _to_frame(predictions)
        if frame.empty:
            raise ValueError("Cannot summarise an empty forecast")

        # idxmax/idxmin keep the earliest hour on ties.
        peak = frame.loc[frame["density"].idxmax()]
        quietest = frame.loc[frame["density"].idxmin()]
        level_counts = frame["level"].value_counts()

        return {
            "hours": int(len(frame)),
            "average_density": round_half_up(float(frame["density"].mean()), 1),
            "peak_hour": {
                "hour": int(peak["hour"]),
                "label": format_hour(int(peak["hour"])),
                "density": float(peak["density"]),
                "level": str(peak["level"]),
            },
            "quietest_hour": {
                "hour": int(quietest["hour"]),
                "label": format_hour(int(quietest["hour"])),
                "density": float(quietest["density"]),
                "level": str(quietest["level"]),
            },
            "hours_per_level": {level: int(level_counts.get(level, 0)) for level in LEVEL_ORDER},
            "mean_confidence": round_half_up(float(frame["confidence"].mean()), 2),
        }

    def build_figures(
        self, predictions: Sequence[HourlyPrediction], title: str = "24-hour forecast"
    ) -> Mapping[str, Figure]:
        frame = _to_frame(predictions)
        if frame.empty:
            return {}

        colors = [LEVEL_COLORS.get(level, "#7f7f7f") for level in frame["level"]]
        fig, ax = plt.subplots(figsize=(10, 4))
        ax.bar(frame["hour"], frame["density"], color=colors, edgecolor="black", linewidth=0.5)
        ax.set_title(title)
        ax.set_xlabel("Hour of day")
        ax.set_ylabel("Predicted density (%)")
        ax.set_xticks(range(0, 24, 2))
        ax.set_ylim(0, 100)
        fig.tight_layout()
        return {"hourly_density": fig}


class ForecastReportRepository:
    """Persist forecast metrics and figures under a reports directory."""

    def __init__(self, reports_dir: Path) -> None:
        self._metrics_dir = Path(reports_dir) / "metrics"
        self._figures_dir = Path(reports_dir) / "figures"

    def save_metrics(self, name: str, metrics: Mapping[str, Any]) -> Path:
        self._metrics_dir.mkdir(parents=True, exist_ok=True)
        destination = self._metrics_dir / f"{slugify(name)}.json"
        destination.write_text(json.dumps(metrics, ensure_ascii=False, indent=2), encoding="utf-8")
        return destination

    def save_figures(self, name: str, figures: Mapping[str, Figure]) -> Mapping[str, Path]:
        self._figures_dir.mkdir(parents=True, exist_ok=True)
        saved_paths: dict[str, Path] = {}
        for figure_name, figure in figures.items():
            destination = self._figures_dir / f"{slugify(name)}_{figure_name}.png"
            figure.savefig(destination, dpi=150, bbox_inches="tight")
            plt.close(figure)
            saved_paths[figure_name] = destination
        return saved_paths


def slugify(value: str) -> str:
    return _SLUG_PATTERN.sub("_", value.lower()).strip("_") or "report"


__all__ = [
    "ForecastReportAnalyzer",
    "ForecastReportRepository",
    "LEVEL_COLORS",
    "slugify",
]
