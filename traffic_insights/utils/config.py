"""Typed access to the YAML application configuration."""
from __future__ import annotations

from pathlib import Path
from typing import Any, TypedDict, cast

import yaml

DEFAULT_HISTORY_DAYS = 30
DEFAULT_WEEKLY_HISTORY_DAYS = 28
DEFAULT_TREND_HOURS_AHEAD = 3
DEFAULT_MAX_WORKERS = 8
DEFAULT_TARGET_LOCATIONS: tuple[str, ...] = (
    "Devegowda Circle",
    "Metagalli Signal Junction",
    "LIC Circle",
    "Krishnarajendra Circle Post Office",
    "Basavanahalli Junction",
)


class PathsConfig(TypedDict, total=False):
    area_catalog: str
    traffic_data: str
    lane_traffic_data: str
    reports_dir: str


class ForecastingConfig(TypedDict, total=False):
    history_days: int
    weekly_history_days: int
    trend_hours_ahead: int
    max_workers: int


class RecommendationsConfig(TypedDict, total=False):
    target_locations: list[str]


class LoggingConfig(TypedDict, total=False):
    level: str
    file: str


class AppConfig(TypedDict, total=False):
    paths: PathsConfig
    forecasting: ForecastingConfig
    recommendations: RecommendationsConfig
    logging: LoggingConfig


def load_config(path: Path) -> AppConfig:
    with Path(path).open("r", encoding="utf-8") as file:
        data = yaml.safe_load(file)

    if not isinstance(data, dict):
        raise ValueError("The configuration file must contain a mapping at the top level.")

    return cast(AppConfig, data)


def require_path(config: AppConfig, key: str) -> Path:
    """Return ``paths.<key>`` or raise ``KeyError`` naming the missing entry."""
    if "paths" not in config:
        raise KeyError("Configuration is missing the 'paths' section.")

    paths = cast(dict[str, Any], config["paths"])
    value = paths.get(key)
    if value is None:
        raise KeyError(f"Configuration 'paths' is missing the '{key}' entry.")
    return Path(str(value))


def forecasting_setting(config: AppConfig, key: str, default: int) -> int:
    section = cast(dict[str, Any], config.get("forecasting", {}) or {})
    value = section.get(key, default)
    if not isinstance(value, int) or value < 1:
        raise ValueError(f"forecasting.{key} must be a positive integer, got {value!r}")
    return value


def target_locations(config: AppConfig) -> tuple[str, ...]:
    section = cast(dict[str, Any], config.get("recommendations", {}) or {})
    locations = section.get("target_locations")
    if not isinstance(locations, list) or not locations:
        return DEFAULT_TARGET_LOCATIONS
    return tuple(str(location).strip() for location in locations if str(location).strip())


def logging_settings(config: AppConfig) -> tuple[str, str | None]:
    section = cast(dict[str, Any], config.get("logging", {}) or {})
    level = str(section.get("level") or "INFO")
    log_file = section.get("file")
    return level, str(log_file) if log_file else None


__all__ = [
    "AppConfig",
    "DEFAULT_HISTORY_DAYS",
    "DEFAULT_MAX_WORKERS",
    "DEFAULT_TARGET_LOCATIONS",
    "DEFAULT_TREND_HOURS_AHEAD",
    "DEFAULT_WEEKLY_HISTORY_DAYS",
    "ForecastingConfig",
    "LoggingConfig",
    "PathsConfig",
    "RecommendationsConfig",
    "forecasting_setting",
    "load_config",
    "logging_settings",
    "require_path",
    "target_locations",
]
