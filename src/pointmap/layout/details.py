"""
Details-panel payloads and click handling for map layers (plain data, no rendering).

Every payload has the same shape: `title`, `description` and `data`, a list of
`{"property", "value"}` rows a sidebar can show as a two-column table.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Sequence

from pointmap.core.clustering import Cluster
from pointmap.core.errors import InvalidArgument
from pointmap.core.proximity import QueryCenter, find_nearby
from pointmap.domain.models import Point
from pointmap.layout.markers import cluster_centroid, cluster_details

logger = logging.getLogger(__name__)

UNKNOWN_POINT_DETAILS: dict[str, Any] = {
    "title": "Unknown Location",
    "description": "No details available for this location.",
    "data": [],
}


def point_details(point: Point | None) -> dict[str, Any]:
    """Details-panel payload for a single point; `None` yields the unknown-location payload."""
    if point is None:
        return {**UNKNOWN_POINT_DETAILS, "data": []}
    return {
        "title": f"{point.name} Details",
        "description": point.description,
        "data": [
            {"property": "ID", "value": str(point.id)},
            {"property": "Category", "value": point.category},
            {"property": "Coordinates", "value": f"{point.lat:.4f}, {point.lon:.4f}"},
        ],
    }


def cluster_click_action(
    cluster: Cluster,
    zoom: float,
    *,
    detail_zoom: float = 10,
    zoom_step: float = 3,
    max_zoom: float = 15,
) -> dict[str, Any]:
    """
    What a click on a cluster marker should do at the current map `zoom`.

    Below `detail_zoom` the map zooms in on the cluster centroid by `zoom_step`
    (capped at `max_zoom`); from `detail_zoom` on, the cluster details are shown.
    """
    if not (math.isfinite(zoom) and zoom >= 0):
        raise InvalidArgument(f"zoom must be a finite non-negative number, got {zoom!r}")
    if zoom < detail_zoom:
        center = cluster_centroid(cluster)
        return {
            "action": "zoom",
            "lat": center.lat,
            "lon": center.lon,
            "zoom": min(zoom + zoom_step, max_zoom),
        }
    return {"action": "details", "details": cluster_details(cluster)}


def sample_nearby(
    points: Sequence[Point],
    *,
    name: str,
    lat: float,
    lon: float,
    radius_km: float,
) -> dict[str, Any]:
    """Nearby listing around a named center with distances rounded to whole kilometres."""
    hits = find_nearby(points, QueryCenter(lat=lat, lon=lon), radius_km)
    logger.info("Sample: found %d points within %.0fkm of %s", len(hits), radius_km, name)
    return {
        "center": {"name": name, "lat": lat, "lon": lon},
        "radius_km": radius_km,
        "count": len(hits),
        "results": [
            {
                "id": h.point.id,
                "name": h.point.name,
                "category": h.point.category,
                "description": h.point.description,
                "distance_km": round(h.distance_km),
            }
            for h in hits
        ],
    }
