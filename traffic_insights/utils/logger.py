"""Centralised Loguru logger and sink configuration."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str = "INFO", log_file: Optional[str | Path] = None) -> None:
    """Replace the default Loguru sink with the project's console (and file) sinks.

    Entry points call this once after loading ``config.yaml``; library modules only
    import ``logger`` and never touch sinks themselves.
    """

    normalized_level = str(level or "INFO").upper()
    logger.remove()
    logger.add(sys.stderr, level=normalized_level, format=_CONSOLE_FORMAT)
    if log_file:
        logger.add(
            str(log_file),
            level=normalized_level,
            rotation="10 MB",
            retention=5,
            encoding="utf-8",
        )
    logger.debug("Logging configured at level {}", normalized_level)


__all__ = ["configure_logging", "logger"]
