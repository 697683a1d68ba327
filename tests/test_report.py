from pointmap.catalog.loader import load_sample_points
from pointmap.catalog.synthetic import generate_points
from pointmap.core.clustering import cell_key
from pointmap.domain.models import Point
from pointmap.quality.report import build_dataset_report


def test_report_on_sample_points():
    report = build_dataset_report(load_sample_points(), cell_size_deg=0.5)
    assert report["point_count"] == 20
    assert report["category_counts"]["city"] == 14
    assert report["clustering"]["cluster_count"] == len({cell_key(p.lat, p.lon, 0.5) for p in load_sample_points()})
    assert report["efficiency"] == "standard"
    assert report["issues"] == []


def test_report_on_large_synthetic_set():
    report = build_dataset_report(generate_points(1500, "clustered", seed=5), cell_size_deg=0.5)
    assert report["efficiency"] == "optimized"
    assert report["clustering"]["largest_cluster"] > 1
    assert report["timing"]["cluster_ms"] >= 0


def test_report_flags_duplicates_and_empty_sets():
    dup = [Point(id=1, name="A", lat=0, lon=0, category="x"), Point(id=1, name="B", lat=1, lon=1, category="x")]
    codes = [i["code"] for i in build_dataset_report(dup, cell_size_deg=0.5)["issues"]]
    assert codes == ["DATASET_DUPLICATE_ID"]

    empty = build_dataset_report([], cell_size_deg=0.5)
    assert [i["code"] for i in empty["issues"]] == ["DATASET_EMPTY"]
    assert empty["clustering"]["largest_cluster"] == 0


def test_report_efficiency_follows_threshold():
    points = load_sample_points()
    assert build_dataset_report(points, cell_size_deg=0.5, threshold=10)["efficiency"] == "optimized"
    assert build_dataset_report(points, cell_size_deg=0.5, threshold=20)["efficiency"] == "standard"
