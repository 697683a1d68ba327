"""
Grid-based spatial clustering for lat/lon points.

Points are bucketed into fixed-size angular cells; each non-empty cell becomes one
`Cluster`. Used to reduce marker density when a dataset grows to thousands of points.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, Iterable, NamedTuple, TypeVar

from pointmap.core.errors import InvalidArgument
from pointmap.core.geo import HasLatLon

T = TypeVar("T", bound=HasLatLon)


class CellKey(NamedTuple):
    """Integer grid cell coordinates: `x` indexes latitude, `y` indexes longitude."""

    x: int
    y: int


@dataclass(frozen=True)
class Cluster(Generic[T]):
    """Points sharing one grid cell, in input order."""

    key: CellKey
    points: tuple[T, ...]

    def __len__(self) -> int:
        return len(self.points)

    @property
    def is_single(self) -> bool:
        return len(self.points) == 1


def _check_cell_size(cell_size_deg: float) -> float:
    size = float(cell_size_deg)
    if not math.isfinite(size) or size <= 0:
        raise InvalidArgument(f"cell_size_deg must be a finite number > 0, got {cell_size_deg!r}")
    return size


def _cell_key(lat: float, lon: float, size: float) -> CellKey:
    try:
        return CellKey(math.floor(lat / size), math.floor(lon / size))
    except (ValueError, OverflowError) as e:
        # NaN/inf coordinates have no integer cell.
        raise InvalidArgument(f"cannot place ({lat!r}, {lon!r}) in a grid cell") from e


def cell_key(lat: float, lon: float, cell_size_deg: float) -> CellKey:
    """Return the grid cell containing (`lat`, `lon`)."""
    return _cell_key(float(lat), float(lon), _check_cell_size(cell_size_deg))


def grid_clusters(points: Iterable[T], cell_size_deg: float) -> list[Cluster[T]]:
    """Partition `points` into one cluster per non-empty grid cell.

    Clusters come out in order of first appearance of their cell, and members keep
    their input order, so identical input always yields identical output.
    """
    size = _check_cell_size(cell_size_deg)
    cells: dict[CellKey, list[T]] = {}
    for p in points:
        cells.setdefault(_cell_key(p.lat, p.lon, size), []).append(p)
    return [Cluster(key=key, points=tuple(members)) for key, members in cells.items()]
