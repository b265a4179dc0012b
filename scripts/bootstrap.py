"""Put the repository root on ``sys.path`` for the traffic insights scripts."""
from __future__ import annotations

import sys
from functools import lru_cache
from pathlib import Path


def _resolve_project_root() -> Path:
    """Return the repository root containing the ``traffic_insights`` package."""

    current = Path(__file__).resolve().parents[1]
    marker = current / "traffic_insights"
    if not marker.exists():
        raise RuntimeError(
            "Could not locate the project root. Expected a 'traffic_insights' directory next to scripts/."
        )
    return current


@lru_cache(maxsize=1)
def bootstrap_project() -> Path:
    """Make ``traffic_insights`` importable from ``scripts/`` and return the project root.

    Cached, so every script can call it at import time.
    """

    project_root = _resolve_project_root()
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        sys.path.insert(0, project_root_str)
    return project_root
