"""
Radius-based nearby-point queries.

`find_nearby` is a pure function of its arguments: callers pass the candidate points,
the query center and the radius explicitly, and get a fresh, distance-ordered list back.
`radius_for_zoom` is an optional caller policy for deriving a radius from a map zoom
level; the query itself never looks at viewport state.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, Iterable, TypeVar

from pointmap.core.errors import InvalidArgument
from pointmap.core.geo import GeoPoint, HasLatLon, distance_km

T = TypeVar("T", bound=HasLatLon)

# The query center is a bare coordinate pair, not a Point.
QueryCenter = GeoPoint


@dataclass(frozen=True)
class NearbyResult(Generic[T]):
    """A point paired with its distance (km) from the query center."""

    point: T
    distance_km: float


def find_nearby(points: Iterable[T], center: HasLatLon, radius_km: float) -> list[NearbyResult[T]]:
    """Return points within `radius_km` of `center` (inclusive), nearest first.

    Ties keep input order (`sorted` is stable). An empty result is not an error.
    """
    r = float(radius_km)
    # `not r >= 0` also rejects NaN.
    if not r >= 0:
        raise InvalidArgument(f"radius_km must be >= 0, got {radius_km!r}")

    lat0 = float(center.lat)
    lon0 = float(center.lon)
    hits: list[NearbyResult[T]] = []
    for p in points:
        d = distance_km(lat0, lon0, p.lat, p.lon)
        if d <= r:
            hits.append(NearbyResult(point=p, distance_km=d))
    return sorted(hits, key=lambda h: h.distance_km)


def radius_for_zoom(zoom: float, *, base_radius_km: float = 1000.0, reference_zoom: float = 3.0) -> float:
    """Derive a search radius from a map zoom level.

    The radius halves with every zoom step past `reference_zoom`:
    `base_radius_km / 2 ** max(0, zoom - reference_zoom)`.
    """
    z = float(zoom)
    if not math.isfinite(z) or z < 0:
        raise InvalidArgument(f"zoom must be a finite number >= 0, got {zoom!r}")
    base = float(base_radius_km)
    if not base >= 0:
        raise InvalidArgument(f"base_radius_km must be >= 0, got {base_radius_km!r}")
    return base / math.pow(2, max(0.0, z - float(reference_zoom)))
