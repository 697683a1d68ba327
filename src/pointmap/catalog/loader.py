"""
Point catalog loader.

A catalog is a JSON array of points with coordinates, a category and a description.
We validate it into typed Pydantic models so the spatial core and the API can assume
a consistent shape. Without a configured path, the packaged sample set is used.
"""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any, Iterable

from pydantic import TypeAdapter

from pointmap.config.settings import Settings
from pointmap.core.env import resolve_project_path
from pointmap.domain.models import Point, PointId

logger = logging.getLogger(__name__)

_POINTS_ADAPTER = TypeAdapter(list[Point])

SAMPLE_POINTS_FILE = "sample_points.json"


def _validate(payload: Any, *, source: str) -> list[Point]:
    if not isinstance(payload, list):
        raise ValueError(f"Invalid point catalog {source}; expected a JSON array.")
    points = _POINTS_ADAPTER.validate_python(payload)
    logger.debug("Loaded %d points from %s", len(points), source)
    return points


def load_points(path: str | Path) -> list[Point]:
    """Load and validate a point catalog JSON file."""
    resolved = resolve_project_path(path)
    payload = json.loads(resolved.read_text(encoding="utf-8"))
    return _validate(payload, source=str(resolved))


def load_sample_points() -> list[Point]:
    """Load the packaged demo point set."""
    text = resources.files("pointmap.catalog").joinpath(SAMPLE_POINTS_FILE).read_text(encoding="utf-8")
    return _validate(json.loads(text), source=SAMPLE_POINTS_FILE)


def load_catalog(settings: Settings) -> list[Point]:
    """Load the configured catalog, falling back to the packaged sample set."""
    if settings.catalog.path:
        return load_points(settings.catalog.path)
    return load_sample_points()


def find_point(points: Iterable[Point], point_id: PointId) -> Point | None:
    """Return the point with `point_id` (compared as strings), or None."""
    wanted = str(point_id)
    for p in points:
        if str(p.id) == wanted:
            return p
    return None
