from __future__ import annotations
from dataclasses import dataclass
from math import atan2, cos, radians, sin, sqrt
from typing import Protocol

"""
Geospatial helpers.

We keep a tiny geometry layer here so clustering and proximity code can do distance
calculations without pulling in heavier GIS dependencies.
"""

EARTH_RADIUS_KM = 6371.0


class HasLatLon(Protocol):
    lat: float
    lon: float


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lon: float


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute great-circle (haversine) distance in kilometers between two coordinates.

    Inputs are not validated: out-of-range coordinates give a defined but meaningless
    result, and NaN propagates.
    """
    phi1 = radians(lat1)
    phi2 = radians(lat2)
    dlat = radians(lat2 - lat1)
    dlon = radians(lon2 - lon1)

    a = sin(dlat / 2) ** 2 + cos(phi1) * cos(phi2) * sin(dlon / 2) ** 2
    # Rounding can push `a` a hair past 1 for antipodal points (NaN passes through).
    if a > 1.0:
        a = 1.0
    return 2 * EARTH_RADIUS_KM * atan2(sqrt(a), sqrt(1 - a))


def haversine_km(a: HasLatLon, b: HasLatLon) -> float:
    """Compute great-circle distance in kilometers between two lat/lon objects."""
    return distance_km(a.lat, a.lon, b.lat, b.lon)
