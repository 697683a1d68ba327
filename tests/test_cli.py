import json

from pointmap.catalog.loader import load_sample_points
from pointmap.cli import main
from pointmap.core.proximity import QueryCenter, find_nearby


def test_cli_nearby_json(capsys):
    rc = main(["nearby", "--lat", "-37.8136", "--lon", "144.9631", "--radius-km", "200", "--json"])
    assert rc == 0
    payload = json.loads(capsys.readouterr().out)
    expected = find_nearby(load_sample_points(), QueryCenter(lat=-37.8136, lon=144.9631), 200)
    assert payload["radius_km"] == 200
    assert [r["point"]["id"] for r in payload["results"]] == [h.point.id for h in expected]


def test_cli_cluster_synthetic_json(capsys):
    rc = main(["cluster", "--synthetic", "300", "--kind", "clustered", "--seed", "1", "--json"])
    assert rc == 0
    clusters = json.loads(capsys.readouterr().out)
    assert sum(c["count"] for c in clusters) == 300


def test_cli_generate_then_cluster_file(tmp_path, capsys):
    out = tmp_path / "points.json"
    assert main(["generate", "--size", "25", "--seed", "2", "--out", str(out)]) == 0
    capsys.readouterr()

    assert len(json.loads(out.read_text(encoding="utf-8"))) == 25
    assert main(["cluster", "--catalog", str(out), "--cell-size", "90"]) == 0
    assert "from 25 points" in capsys.readouterr().out


def test_cli_reports_invalid_arguments(capsys):
    rc = main(["cluster", "--cell-size", "0"])
    assert rc == 2
    assert "cell_size_deg" in capsys.readouterr().err


def test_cli_nearby_defaults_to_demo_center_and_radius(capsys):
    assert main(["nearby", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["radius_km"] == 2000
    assert payload["center"] == {"lat": -37.8136, "lon": 144.9631}
    expected = find_nearby(load_sample_points(), QueryCenter(lat=-37.8136, lon=144.9631), 2000)
    assert [r["point"]["id"] for r in payload["results"]] == [h.point.id for h in expected]


def test_cli_details(capsys):
    assert main(["details", "--id", "19"]) == 0
    details = json.loads(capsys.readouterr().out)
    assert details["title"] == "Richmond Details"
    assert {"property": "Category", "value": "suburb"} in details["data"]


def test_cli_click_zoom_and_details(capsys):
    assert main(["click", "--cell", "-4", "14", "--cell-size", "10", "--zoom", "4"]) == 0
    action = json.loads(capsys.readouterr().out)
    assert action["action"] == "zoom"
    assert action["zoom"] == 7

    assert main(["click", "--cell", "-4", "14", "--cell-size", "10", "--zoom", "12"]) == 0
    action = json.loads(capsys.readouterr().out)
    assert action["action"] == "details"

    assert main(["click", "--cell", "0", "0", "--cell-size", "10", "--zoom", "4"]) == 1
    assert "no cluster" in capsys.readouterr().err


def test_cli_sample_nearby(capsys):
    assert main(["sample-nearby", "--json"]) == 0
    listing = json.loads(capsys.readouterr().out)
    assert [r["name"] for r in listing["results"]] == ["London", "Paris"]

    assert main(["sample-nearby"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Sample: found 2 points within 3000km of London")
    assert "London (city)  0km" in out
