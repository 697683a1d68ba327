"""
Synthetic point datasets for stress-testing clustering and nearby queries.

Two shapes are supported:
- `random`: points spread uniformly over the lat/lon plane
- `clustered`: points scattered around a handful of city centers

Generation is deterministic when a `seed` is given.
"""

from __future__ import annotations

import logging
import math
import random
import time
from typing import Literal, Sequence

from pointmap.core.errors import InvalidArgument
from pointmap.core.geo import GeoPoint, HasLatLon
from pointmap.domain.models import Point

logger = logging.getLogger(__name__)

DatasetKind = Literal["random", "clustered"]

DEFAULT_CENTERS: tuple[GeoPoint, ...] = (
    GeoPoint(lat=40.7128, lon=-74.0060),  # New York
    GeoPoint(lat=51.5074, lon=-0.1278),  # London
    GeoPoint(lat=35.6762, lon=139.6503),  # Tokyo
    GeoPoint(lat=-33.8688, lon=151.2093),  # Sydney
    GeoPoint(lat=48.8566, lon=2.3522),  # Paris
)


def _random_points(rng: random.Random, size: int, id_offset: int) -> list[Point]:
    return [
        Point(
            id=i + id_offset,
            name=f"Test Point {i + 1}",
            lat=(rng.random() - 0.5) * 180,
            lon=(rng.random() - 0.5) * 360,
            category="test",
            description=f"Generated test point {i + 1} for stress testing",
        )
        for i in range(size)
    ]


def _clamp_lat(lat: float) -> float:
    return max(-90.0, min(90.0, lat))


def _wrap_lon(lon: float) -> float:
    # Offsets past the antimeridian come back in from the other side: [-180, 180).
    return (lon + 180.0) % 360.0 - 180.0


def _clustered_points(
    rng: random.Random,
    size: int,
    id_offset: int,
    centers: Sequence[HasLatLon],
    spread_deg: float,
) -> list[Point]:
    out: list[Point] = []
    for i in range(size):
        center = rng.choice(centers)
        angle = rng.random() * 2 * math.pi
        dist = rng.random() * spread_deg
        out.append(
            Point(
                id=i + id_offset,
                name=f"Clustered Point {i + 1}",
                lat=_clamp_lat(center.lat + dist * math.cos(angle)),
                lon=_wrap_lon(center.lon + dist * math.sin(angle)),
                category="test-clustered",
                description=f"Clustered test point {i + 1}",
            )
        )
    return out


def generate_points(
    size: int,
    kind: DatasetKind = "random",
    *,
    seed: int | None = None,
    centers: Sequence[HasLatLon] | None = None,
    spread_deg: float = 0.5,
    id_offset: int = 1000,
) -> list[Point]:
    """Generate `size` synthetic points of the given `kind`.

    Ids start at `id_offset` so they do not collide with catalog ids.
    """
    if size < 0:
        raise InvalidArgument(f"size must be >= 0, got {size!r}")
    if spread_deg < 0:
        raise InvalidArgument(f"spread_deg must be >= 0, got {spread_deg!r}")

    rng = random.Random(seed)
    start = time.perf_counter()
    if kind == "random":
        points = _random_points(rng, int(size), id_offset)
    elif kind == "clustered":
        pool = list(centers) if centers else list(DEFAULT_CENTERS)
        points = _clustered_points(rng, int(size), id_offset, pool, float(spread_deg))
    else:
        raise InvalidArgument(f"unknown dataset kind {kind!r}; expected 'random' or 'clustered'")

    logger.info("Generated %d %s points in %.2fms", len(points), kind, (time.perf_counter() - start) * 1000)
    return points
