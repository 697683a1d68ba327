"""
API routes.

Endpoints:
- GET  `/api/points`, `/api/points/{point_id}`: catalog points.
- GET  `/api/points/{point_id}/details`: details-panel payload for a point.
- GET  `/api/clusters`: grid clusters with derived centroids.
- GET  `/api/clusters/{x}/{y}/click`: zoom-or-details action for a cluster marker click.
- GET  `/api/markers`: marker layout (clustered above the configured threshold).
- GET/POST `/api/nearby`: distance-ordered points around a center.
- GET  `/api/nearby/sample`: the fixed London sample listing (whole-km distances).
- GET  `/api/report`: offline dataset report.
- GET  `/api/settings`: public settings for UI defaults.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import APIRouter, HTTPException, Query

from pointmap.catalog.loader import find_point, load_catalog
from pointmap.config.overrides import apply_settings_overrides
from pointmap.config.settings import Settings, get_settings
from pointmap.core.clustering import CellKey, grid_clusters
from pointmap.core.proximity import QueryCenter, find_nearby, radius_for_zoom
from pointmap.domain.models import (
    ClusterOut,
    Coordinate,
    MarkerLayoutOut,
    NearbyItem,
    NearbyQuery,
    NearbyResponse,
    Point,
)
from pointmap.layout.details import cluster_click_action, point_details, sample_nearby
from pointmap.layout.markers import build_markers, cluster_centroid
from pointmap.quality.report import build_dataset_report

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache
def _points() -> list[Point]:
    return load_catalog(get_settings())


def _bad_request(e: ValueError) -> HTTPException:
    return HTTPException(status_code=400, detail={"code": "VALIDATION_ERROR", "message": str(e)})


def _resolve_radius(settings: Settings, radius_km: float | None, zoom: float | None) -> float:
    if radius_km is not None:
        return float(radius_km)
    if zoom is not None:
        return radius_for_zoom(
            zoom,
            base_radius_km=settings.nearby.base_radius_km,
            reference_zoom=settings.nearby.reference_zoom,
        )
    return settings.nearby.default_radius_km


def _nearby(settings: Settings, center: Coordinate, radius_km: float | None, zoom: float | None) -> NearbyResponse:
    radius = _resolve_radius(settings, radius_km, zoom)
    hits = find_nearby(_points(), QueryCenter(lat=center.lat, lon=center.lon), radius)
    logger.info("Found %d points within %.1fkm of (%.4f, %.4f)", len(hits), radius, center.lat, center.lon)
    return NearbyResponse(
        center=center,
        radius_km=radius,
        count=len(hits),
        results=[NearbyItem(point=h.point, distance_km=h.distance_km) for h in hits],
    )


@router.get("/api/points", response_model=list[Point])
def get_points() -> list[Point]:
    """Return every catalog point."""
    return _points()


@router.get("/api/points/{point_id}", response_model=Point)
def get_point(point_id: str) -> Point:
    """Return a single point by id."""
    point = find_point(_points(), point_id)
    if point is None:
        raise HTTPException(status_code=404, detail={"code": "NOT_FOUND", "message": f"Unknown point: {point_id}"})
    return point


@router.get("/api/points/{point_id}/details")
def get_point_details(point_id: str) -> dict:
    """Details-panel payload for a point (unknown ids get the unknown-location payload)."""
    return point_details(find_point(_points(), point_id))


@router.get("/api/clusters", response_model=list[ClusterOut])
def get_clusters(cell_size_deg: float | None = Query(default=None)) -> list[ClusterOut]:
    """Grid-cluster the catalog (cell size defaults to the configured value)."""
    settings = get_settings()
    size = settings.clustering.cell_size_deg if cell_size_deg is None else cell_size_deg
    try:
        clusters = grid_clusters(_points(), size)
    except ValueError as e:
        raise _bad_request(e) from e

    out: list[ClusterOut] = []
    for c in clusters:
        center = cluster_centroid(c)
        out.append(
            ClusterOut(
                cell=(c.key.x, c.key.y),
                count=len(c),
                centroid=Coordinate(lat=center.lat, lon=center.lon),
                points=list(c.points),
            )
        )
    return out


@router.get("/api/clusters/{x}/{y}/click")
def get_cluster_click(
    x: int,
    y: int,
    zoom: float = Query(..., ge=0),
    cell_size_deg: float | None = Query(default=None),
) -> dict:
    """What clicking the cluster in cell (`x`, `y`) does at map `zoom`."""
    settings = get_settings()
    size = settings.clustering.cell_size_deg if cell_size_deg is None else cell_size_deg
    try:
        clusters = grid_clusters(_points(), size)
    except ValueError as e:
        raise _bad_request(e) from e

    key = CellKey(x, y)
    cluster = next((c for c in clusters if c.key == key), None)
    if cluster is None:
        raise HTTPException(status_code=404, detail={"code": "NOT_FOUND", "message": f"No cluster in cell {x}, {y}"})
    return cluster_click_action(cluster, zoom)


@router.get("/api/markers", response_model=MarkerLayoutOut)
def get_markers() -> MarkerLayoutOut:
    """Marker layout for the catalog, as a map layer would draw it."""
    cfg = get_settings().clustering
    layout = build_markers(
        _points(),
        cell_size_deg=cfg.cell_size_deg,
        threshold=cfg.threshold,
        preview_size=cfg.preview_size,
        bounds_padding=cfg.bounds_padding,
    )
    return MarkerLayoutOut.model_validate(layout.as_dict())


@router.get("/api/nearby", response_model=NearbyResponse)
def get_nearby(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    radius_km: float | None = Query(default=None),
    zoom: float | None = Query(default=None),
) -> NearbyResponse:
    """Points within `radius_km` of (`lat`, `lon`); `zoom` derives a radius when none is given."""
    try:
        return _nearby(get_settings(), Coordinate(lat=lat, lon=lon), radius_km, zoom)
    except ValueError as e:
        raise _bad_request(e) from e


@router.post("/api/nearby", response_model=NearbyResponse)
def post_nearby(query: NearbyQuery) -> NearbyResponse:
    """Nearby search with an optional per-request settings override."""
    try:
        settings = apply_settings_overrides(get_settings(), query.settings_overrides)
        return _nearby(settings, query.center, query.radius_km, query.zoom)
    except ValueError as e:
        raise _bad_request(e) from e


@router.get("/api/nearby/sample")
def get_sample_nearby() -> dict:
    """Nearby listing for the configured sample center and radius."""
    cfg = get_settings().nearby
    center = cfg.sample_center
    return sample_nearby(_points(), name=center.name, lat=center.lat, lon=center.lon, radius_km=cfg.sample_radius_km)


@router.get("/api/report")
def get_report() -> dict:
    """Offline dataset report for the catalog."""
    cfg = get_settings().clustering
    return build_dataset_report(_points(), cell_size_deg=cfg.cell_size_deg, threshold=cfg.threshold)


@router.get("/api/settings")
def get_public_settings() -> dict:
    """Return safe-to-expose settings for UI defaults (catalog path omitted)."""
    data = get_settings().model_dump(mode="json")
    return {
        "app": {"name": data["app"]["name"]},
        "clustering": data["clustering"],
        "nearby": data["nearby"],
    }
