import json

import pytest
from pydantic import ValidationError

from pointmap.catalog.loader import find_point, load_catalog, load_points, load_sample_points
from pointmap.catalog.synthetic import DEFAULT_CENTERS, generate_points
from pointmap.config.settings import get_settings
from pointmap.core.errors import InvalidArgument
from pointmap.core.geo import GeoPoint, distance_km
from pointmap.domain.models import Point


def test_sample_points_are_the_demo_set():
    points = load_sample_points()
    assert len(points) == 20
    assert len({p.id for p in points}) == 20
    assert points[0].name == "New York City"
    assert points[-1].name == "Footscray"
    assert {p.category for p in points} == {"city", "coastal", "landmark", "suburb"}


def test_load_points_accepts_lng_and_type_aliases(tmp_path):
    path = tmp_path / "points.json"
    path.write_text(
        json.dumps(
            [{"id": 1, "name": "X", "lat": 1.5, "lng": 2.5, "type": "City", "description": "d"}]
        ),
        encoding="utf-8",
    )
    [p] = load_points(path)
    assert p.lon == 2.5
    # Category labels are kept verbatim.
    assert p.category == "City"
    assert p.model_dump(mode="json")["lon"] == 2.5


def test_load_points_rejects_out_of_range_coordinates(tmp_path):
    path = tmp_path / "points.json"
    path.write_text(json.dumps([{"id": 1, "name": "X", "lat": 91, "lon": 0}]), encoding="utf-8")
    with pytest.raises(ValidationError):
        load_points(path)


def test_load_points_rejects_non_array_root(tmp_path):
    path = tmp_path / "points.json"
    path.write_text(json.dumps({"points": []}), encoding="utf-8")
    with pytest.raises(ValueError, match="expected a JSON array"):
        load_points(path)


def test_load_catalog_prefers_configured_path(tmp_path):
    path = tmp_path / "points.json"
    path.write_text(json.dumps([{"id": "a", "name": "A", "lat": 0, "lon": 0}]), encoding="utf-8")
    settings = get_settings()

    configured = settings.model_copy(update={"catalog": settings.catalog.model_copy(update={"path": str(path)})})
    assert [p.id for p in load_catalog(configured)] == ["a"]

    unset = settings.model_copy(update={"catalog": settings.catalog.model_copy(update={"path": None})})
    assert len(load_catalog(unset)) == 20


def test_points_are_immutable():
    p = Point(id=1, name="A", lat=0, lon=0)
    with pytest.raises(ValidationError):
        p.lat = 5


def test_find_point_matches_ids_as_strings():
    points = load_sample_points()
    assert find_point(points, 11).name == "Melbourne"
    assert find_point(points, "11").name == "Melbourne"
    assert find_point(points, "999") is None


def test_generate_random_points():
    points = generate_points(50, "random", seed=1)
    assert len(points) == 50
    assert [p.id for p in points] == list(range(1000, 1050))
    assert points[0].name == "Test Point 1"
    assert all(p.category == "test" for p in points)
    assert all(-90 <= p.lat <= 90 and -180 <= p.lon <= 180 for p in points)


def test_generate_clustered_points_stay_near_a_center():
    points = generate_points(200, "clustered", seed=3, spread_deg=0.5)
    assert all(p.category == "test-clustered" for p in points)
    for p in points:
        nearest = min(distance_km(p.lat, p.lon, c.lat, c.lon) for c in DEFAULT_CENTERS)
        # 0.5 degrees is at most ~56 km.
        assert nearest < 60


def test_clustered_points_near_pole_and_antimeridian_stay_in_range():
    points = generate_points(200, "clustered", seed=1, centers=[GeoPoint(lat=89.9, lon=179.9)], spread_deg=0.5)
    assert len(points) == 200
    assert all(-90 <= p.lat <= 90 for p in points)
    assert all(-180 <= p.lon < 180 for p in points)
    # Offsets past 180 wrap around to just above -180.
    assert any(p.lon < 0 for p in points)


def test_generation_is_reproducible_with_a_seed():
    assert generate_points(30, "clustered", seed=9) == generate_points(30, "clustered", seed=9)


def test_generate_zero_points():
    assert generate_points(0) == []


def test_generate_rejects_bad_arguments():
    with pytest.raises(InvalidArgument):
        generate_points(-1)
    with pytest.raises(InvalidArgument, match="unknown dataset kind"):
        generate_points(10, "spiral")
