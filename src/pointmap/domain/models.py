"""
Domain models (Pydantic).

These types represent the stable "contract" between layers:
- point source entities (`Point`)
- API/CLI inputs (`Coordinate`, `NearbyQuery`)
- plain-data output for renderers and details panels (`ClusterOut`, `NearbyItem`, ...)

The spatial core itself works on anything with `lat`/`lon` attributes; these models
are what the catalog, API and CLI exchange.
"""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

PointId = Union[int, str]


class Coordinate(BaseModel):
    """A geographic coordinate in decimal degrees (e.g. a query center)."""

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180, validation_alias=AliasChoices("lon", "lng"))


class Point(BaseModel):
    """An immutable map point supplied by a point source."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: PointId
    name: str
    lat: float = Field(..., ge=-90, le=90)
    # Leaflet-style payloads spell these `lng` and `type`.
    lon: float = Field(..., ge=-180, le=180, validation_alias=AliasChoices("lon", "lng"))
    category: str = Field("", validation_alias=AliasChoices("category", "type"))
    description: str = ""


class NearbyQuery(BaseModel):
    """Request body for a nearby-points search."""

    center: Coordinate
    radius_km: float | None = Field(default=None, ge=0)
    zoom: float | None = Field(default=None, ge=0)
    settings_overrides: dict[str, Any] | None = None


class NearbyItem(BaseModel):
    point: Point
    distance_km: float = Field(..., ge=0)


class NearbyResponse(BaseModel):
    """Distance-ordered nearby results plus the effective query parameters."""

    center: Coordinate
    radius_km: float
    count: int
    results: list[NearbyItem]


class ClusterOut(BaseModel):
    """One grid cluster with its derived centroid."""

    cell: tuple[int, int]
    count: int
    centroid: Coordinate
    points: list[Point]


class MarkerOut(BaseModel):
    """A single renderable marker: either one point or a cluster badge."""

    kind: Literal["point", "cluster"]
    lat: float
    lon: float
    count: int = 1
    point: Point | None = None
    cell: tuple[int, int] | None = None
    preview: list[str] = Field(default_factory=list)
    remaining: int = 0


class BoundsOut(BaseModel):
    south: float
    west: float
    north: float
    east: float


class MarkerLayoutOut(BaseModel):
    clustered: bool
    cluster_count: int
    markers: list[MarkerOut]
    bounds: BoundsOut | None = None
