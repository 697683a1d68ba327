from collections import Counter

import pytest

from pointmap.catalog.synthetic import generate_points
from pointmap.core.clustering import CellKey, Cluster, cell_key, grid_clusters
from pointmap.core.errors import InvalidArgument
from pointmap.core.geo import GeoPoint


def test_empty_input_gives_no_clusters():
    assert grid_clusters([], 0.5) == []


def test_single_point_gives_single_member_cluster():
    p = GeoPoint(lat=10.2, lon=20.7)
    clusters = grid_clusters([p], 0.5)
    assert len(clusters) == 1
    assert clusters[0].points == (p,)
    assert clusters[0].is_single
    assert clusters[0].key == CellKey(20, 41)


def test_points_in_one_cell_collapse_into_one_cluster():
    points = [
        GeoPoint(lat=-37.80, lon=144.90),
        GeoPoint(lat=-37.85, lon=144.95),
        GeoPoint(lat=-37.88, lon=144.99),
        GeoPoint(lat=-37.82, lon=144.93),
    ]
    clusters = grid_clusters(points, 0.5)
    assert len(clusters) == 1
    assert len(clusters[0]) == 4
    # Members keep input order.
    assert list(clusters[0].points) == points


def test_cell_keys_floor_negative_coordinates():
    assert cell_key(-0.1, -0.1, 0.5) == CellKey(-1, -1)
    assert cell_key(0.0, 0.0, 0.5) == CellKey(0, 0)
    assert cell_key(0.49, 0.51, 0.5) == CellKey(0, 1)
    assert cell_key(-37.8136, 144.9631, 0.5) == CellKey(-76, 289)


def test_cluster_order_follows_first_appearance():
    a1 = GeoPoint(lat=1.1, lon=1.1)
    b1 = GeoPoint(lat=5.1, lon=5.1)
    a2 = GeoPoint(lat=1.2, lon=1.2)
    c1 = GeoPoint(lat=-3.3, lon=7.7)
    b2 = GeoPoint(lat=5.2, lon=5.2)

    clusters = grid_clusters([a1, b1, a2, c1, b2], 0.5)

    assert [c.points for c in clusters] == [(a1, a2), (b1, b2), (c1,)]
    assert [c.key for c in clusters] == [CellKey(2, 2), CellKey(10, 10), CellKey(-7, 15)]


def test_clustering_is_deterministic():
    points = generate_points(500, "clustered", seed=7)
    assert grid_clusters(points, 0.25) == grid_clusters(points, 0.25)


@pytest.mark.parametrize("kind", ["random", "clustered"])
@pytest.mark.parametrize("cell_size", [0.1, 0.5, 5.0])
def test_clusters_partition_every_point_exactly_once(kind, cell_size):
    points = generate_points(300, kind, seed=42)
    clusters = grid_clusters(points, cell_size)

    members = [p.id for c in clusters for p in c.points]
    assert Counter(members) == Counter(p.id for p in points)

    keys = [c.key for c in clusters]
    assert len(keys) == len(set(keys))
    for c in clusters:
        assert isinstance(c, Cluster)
        assert all(cell_key(p.lat, p.lon, cell_size) == c.key for p in c.points)


@pytest.mark.parametrize("cell_size", [0, -0.5, float("nan"), float("inf")])
def test_invalid_cell_size_is_rejected(cell_size):
    with pytest.raises(InvalidArgument):
        grid_clusters([GeoPoint(lat=0.0, lon=0.0)], cell_size)


def test_invalid_cell_size_is_rejected_even_for_empty_input():
    with pytest.raises(InvalidArgument):
        grid_clusters([], 0)


def test_nan_point_cannot_be_placed_in_a_cell():
    with pytest.raises(InvalidArgument, match="grid cell"):
        grid_clusters([GeoPoint(lat=float("nan"), lon=0.0)], 0.5)


def test_invalid_argument_is_a_value_error():
    assert issubclass(InvalidArgument, ValueError)
