"""
Marker layout for map renderers (plain data, no rendering).

Given a point collection, decide what a map layer should draw:
- small datasets: one marker per point
- large datasets (above `threshold`): grid-cluster first; single-member clusters are drawn
  as ordinary point markers, the rest as a cluster badge at the members' centroid

Centroids and previews are derived here, on the consumer side, so `Cluster` itself never
carries redundant state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Literal, Sequence

from pointmap.core.clustering import CellKey, Cluster, grid_clusters
from pointmap.core.geo import GeoPoint
from pointmap.domain.models import Point

logger = logging.getLogger(__name__)


def cluster_centroid(cluster: Cluster) -> GeoPoint:
    """Mean latitude/longitude of a cluster's members."""
    n = len(cluster.points)
    return GeoPoint(
        lat=sum(p.lat for p in cluster.points) / n,
        lon=sum(p.lon for p in cluster.points) / n,
    )


def cluster_preview(cluster: Cluster, limit: int = 5) -> tuple[list[str], int]:
    """First `limit` member names plus the count of members not shown."""
    names = [p.name for p in cluster.points[:limit]]
    return names, len(cluster.points) - len(names)


def cluster_details(cluster: Cluster, *, sample_size: int = 3) -> dict[str, Any]:
    """Details-panel payload for a cluster."""
    count = len(cluster.points)
    return {
        "title": f"Cluster Details ({count} points)",
        "description": f"This cluster contains {count} points in the same geographical area.",
        "data": [
            {"property": "Point Count", "value": str(count)},
            {"property": "Grid Location", "value": f"{cluster.key.x}, {cluster.key.y}"},
            {"property": "Sample Points", "value": ", ".join(p.name for p in cluster.points[:sample_size])},
        ],
    }


@dataclass(frozen=True)
class Bounds:
    south: float
    west: float
    north: float
    east: float

    @classmethod
    def from_coordinates(cls, coords: Sequence[GeoPoint | Point]) -> Bounds | None:
        if not coords:
            return None
        lats = [c.lat for c in coords]
        lons = [c.lon for c in coords]
        return cls(south=min(lats), west=min(lons), north=max(lats), east=max(lons))

    def pad(self, ratio: float) -> Bounds:
        """Extend each side by `ratio` of the current span."""
        dlat = (self.north - self.south) * ratio
        dlon = (self.east - self.west) * ratio
        return Bounds(
            south=self.south - dlat,
            west=self.west - dlon,
            north=self.north + dlat,
            east=self.east + dlon,
        )

    def as_dict(self) -> dict[str, float]:
        return {"south": self.south, "west": self.west, "north": self.north, "east": self.east}


@dataclass(frozen=True)
class Marker:
    kind: Literal["point", "cluster"]
    lat: float
    lon: float
    count: int = 1
    point: Point | None = None
    cell: CellKey | None = None
    preview: list[str] = field(default_factory=list)
    remaining: int = 0

    def as_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "lat": self.lat,
            "lon": self.lon,
            "count": self.count,
            "point": self.point.model_dump(mode="json") if self.point is not None else None,
            "cell": tuple(self.cell) if self.cell is not None else None,
            "preview": list(self.preview),
            "remaining": self.remaining,
        }


@dataclass(frozen=True)
class MarkerLayout:
    markers: list[Marker]
    clustered: bool
    cluster_count: int
    bounds: Bounds | None

    def as_dict(self) -> dict[str, Any]:
        return {
            "clustered": self.clustered,
            "cluster_count": self.cluster_count,
            "markers": [m.as_dict() for m in self.markers],
            "bounds": self.bounds.as_dict() if self.bounds is not None else None,
        }


def _point_marker(p: Point) -> Marker:
    return Marker(kind="point", lat=p.lat, lon=p.lon, point=p)


def build_markers(
    points: Sequence[Point],
    *,
    cell_size_deg: float = 0.5,
    threshold: int = 1000,
    preview_size: int = 5,
    bounds_padding: float = 0.1,
) -> MarkerLayout:
    """Lay out markers for `points`, clustering only when there are more than `threshold`."""
    if len(points) <= threshold:
        markers = [_point_marker(p) for p in points]
        bounds = Bounds.from_coordinates(points)
        return MarkerLayout(
            markers=markers,
            clustered=False,
            cluster_count=0,
            bounds=bounds.pad(bounds_padding) if bounds else None,
        )

    clusters = grid_clusters(points, cell_size_deg)
    logger.info("Created %d clusters from %d points", len(clusters), len(points))

    markers: list[Marker] = []
    centers: list[GeoPoint] = []
    for c in clusters:
        center = cluster_centroid(c)
        centers.append(center)
        if c.is_single:
            markers.append(_point_marker(c.points[0]))
            continue
        names, remaining = cluster_preview(c, preview_size)
        markers.append(
            Marker(
                kind="cluster",
                lat=center.lat,
                lon=center.lon,
                count=len(c),
                cell=c.key,
                preview=names,
                remaining=remaining,
            )
        )

    bounds = Bounds.from_coordinates(centers)
    return MarkerLayout(
        markers=markers,
        clustered=True,
        cluster_count=len(clusters),
        bounds=bounds.pad(bounds_padding) if bounds else None,
    )
