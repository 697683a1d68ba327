"""
PointMap CLI entrypoint.

This CLI is intended for quick local demos and debugging without a map UI.
It delegates all spatial logic to `pointmap.core`.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from pointmap.catalog.loader import find_point, load_catalog, load_points
from pointmap.catalog.synthetic import generate_points
from pointmap.config.settings import Settings, get_settings
from pointmap.core.clustering import CellKey, grid_clusters
from pointmap.core.errors import InvalidArgument
from pointmap.core.logging import configure_logging
from pointmap.core.proximity import QueryCenter, find_nearby, radius_for_zoom
from pointmap.domain.models import Point
from pointmap.layout.details import cluster_click_action, point_details, sample_nearby
from pointmap.layout.markers import cluster_centroid, cluster_preview
from pointmap.quality.report import build_dataset_report


def _load_input_points(args: argparse.Namespace, settings: Settings) -> list[Point]:
    """Resolve the point source for a subcommand: synthetic, explicit file, or configured catalog."""
    if getattr(args, "synthetic", None) is not None:
        return generate_points(
            int(args.synthetic),
            args.kind or settings.synthetic.kind,
            seed=settings.synthetic.seed if args.seed is None else args.seed,
            centers=settings.synthetic.centers or None,
            spread_deg=settings.synthetic.spread_deg,
            id_offset=settings.synthetic.id_offset,
        )
    if getattr(args, "catalog", None):
        return load_points(args.catalog)
    return load_catalog(settings)


def _cmd_nearby(args: argparse.Namespace) -> int:
    """Handle the `nearby` subcommand."""
    settings = get_settings()
    points = _load_input_points(args, settings)
    demo = settings.nearby.demo_center
    lat = demo.lat if args.lat is None else float(args.lat)
    lon = demo.lon if args.lon is None else float(args.lon)

    if args.radius_km is not None:
        radius = float(args.radius_km)
    elif args.zoom is not None:
        radius = radius_for_zoom(
            args.zoom,
            base_radius_km=settings.nearby.base_radius_km,
            reference_zoom=settings.nearby.reference_zoom,
        )
    else:
        radius = settings.nearby.default_radius_km

    hits = find_nearby(points, QueryCenter(lat=lat, lon=lon), radius)

    if args.json:
        payload = {
            "center": {"lat": lat, "lon": lon},
            "radius_km": radius,
            "results": [
                {"point": h.point.model_dump(mode="json"), "distance_km": h.distance_km} for h in hits
            ],
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    print(f"Found {len(hits)} points within {radius:.0f}km of ({lat:.4f}, {lon:.4f})")
    for i, h in enumerate(hits, start=1):
        print(f"{i:>3}. {h.point.name} ({h.point.category})  {h.distance_km:.0f}km")
    return 0


def _cmd_cluster(args: argparse.Namespace) -> int:
    """Handle the `cluster` subcommand."""
    settings = get_settings()
    points = _load_input_points(args, settings)
    cell_size = settings.clustering.cell_size_deg if args.cell_size is None else float(args.cell_size)
    clusters = grid_clusters(points, cell_size)

    if args.json:
        payload = []
        for c in clusters:
            center = cluster_centroid(c)
            payload.append(
                {
                    "cell": [c.key.x, c.key.y],
                    "count": len(c),
                    "centroid": {"lat": center.lat, "lon": center.lon},
                    "point_ids": [p.id for p in c.points],
                }
            )
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    print(f"Created {len(clusters)} clusters from {len(points)} points (cell={cell_size}°)")
    for c in clusters:
        names, remaining = cluster_preview(c, settings.clustering.preview_size)
        more = f" ... and {remaining} more" if remaining else ""
        print(f"  [{c.key.x}, {c.key.y}] {len(c):>5}  {', '.join(names)}{more}")
    return 0


def _cmd_generate(args: argparse.Namespace) -> int:
    """Handle the `generate` subcommand (writes a catalog JSON file or prints to stdout)."""
    settings = get_settings()
    points = generate_points(
        int(args.size),
        args.kind or settings.synthetic.kind,
        seed=settings.synthetic.seed if args.seed is None else args.seed,
        centers=settings.synthetic.centers or None,
        spread_deg=settings.synthetic.spread_deg,
        id_offset=settings.synthetic.id_offset,
    )
    text = json.dumps([p.model_dump(mode="json") for p in points], ensure_ascii=False, indent=2)
    if args.out:
        out = Path(args.out)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text, encoding="utf-8")
        print(f"Wrote {len(points)} points to {out}")
    else:
        print(text)
    return 0


def _cmd_details(args: argparse.Namespace) -> int:
    """Handle the `details` subcommand."""
    settings = get_settings()
    points = _load_input_points(args, settings)
    print(json.dumps(point_details(find_point(points, args.id)), ensure_ascii=False, indent=2))
    return 0


def _cmd_click(args: argparse.Namespace) -> int:
    """Handle the `click` subcommand: what a click on the cluster in a cell does at a zoom."""
    settings = get_settings()
    points = _load_input_points(args, settings)
    cell_size = settings.clustering.cell_size_deg if args.cell_size is None else float(args.cell_size)
    key = CellKey(*args.cell)
    cluster = next((c for c in grid_clusters(points, cell_size) if c.key == key), None)
    if cluster is None:
        print(f"error: no cluster in cell {key.x}, {key.y}", file=sys.stderr)
        return 1
    print(json.dumps(cluster_click_action(cluster, args.zoom), ensure_ascii=False, indent=2))
    return 0


def _cmd_sample_nearby(args: argparse.Namespace) -> int:
    """Handle the `sample-nearby` subcommand."""
    settings = get_settings()
    points = _load_input_points(args, settings)
    center = settings.nearby.sample_center
    listing = sample_nearby(
        points,
        name=center.name,
        lat=center.lat,
        lon=center.lon,
        radius_km=settings.nearby.sample_radius_km,
    )
    if args.json:
        print(json.dumps(listing, ensure_ascii=False, indent=2))
        return 0

    print(f"Sample: found {listing['count']} points within {listing['radius_km']:.0f}km of {center.name}")
    for item in listing["results"]:
        print(f"  {item['name']} ({item['category']})  {item['distance_km']}km")
    return 0


def _cmd_report(args: argparse.Namespace) -> int:
    settings = get_settings()
    points = _load_input_points(args, settings)
    report = build_dataset_report(
        points,
        cell_size_deg=settings.clustering.cell_size_deg,
        threshold=settings.clustering.threshold,
    )
    print(json.dumps(report, ensure_ascii=False, indent=2))
    return 0


def _add_source_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--catalog", type=str, default=None, help="Point catalog JSON (defaults to configured catalog)")
    p.add_argument("--synthetic", type=int, default=None, help="Use N generated points instead of a catalog")
    p.add_argument("--kind", choices=["random", "clustered"], default=None)
    p.add_argument("--seed", type=int, default=None)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the PointMap CLI."""
    parser = argparse.ArgumentParser(prog="pointmap")
    sub = parser.add_subparsers(dest="command", required=True)

    near = sub.add_parser("nearby", help="List points within a radius of a center, nearest first.")
    near.add_argument("--lat", type=float, default=None, help="Center latitude (defaults to nearby.demo_center)")
    near.add_argument("--lon", type=float, default=None, help="Center longitude (defaults to nearby.demo_center)")
    radius = near.add_mutually_exclusive_group()
    radius.add_argument("--radius-km", dest="radius_km", type=float, default=None)
    radius.add_argument("--zoom", type=float, default=None, help="Derive the radius from a map zoom level")
    _add_source_args(near)
    near.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    near.set_defaults(func=_cmd_nearby)

    clu = sub.add_parser("cluster", help="Grid-cluster a point set.")
    clu.add_argument("--cell-size", dest="cell_size", type=float, default=None, help="Cell size in degrees")
    _add_source_args(clu)
    clu.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    clu.set_defaults(func=_cmd_cluster)

    gen = sub.add_parser("generate", help="Generate a synthetic point catalog for stress testing.")
    gen.add_argument("--size", required=True, type=int)
    gen.add_argument("--kind", choices=["random", "clustered"], default=None)
    gen.add_argument("--seed", type=int, default=None)
    gen.add_argument("--out", type=str, default=None, help="Output path (stdout if omitted)")
    gen.set_defaults(func=_cmd_generate)

    rep = sub.add_parser("report", help="Offline dataset report (counts, clustering stats, issues).")
    _add_source_args(rep)
    rep.set_defaults(func=_cmd_report)

    det = sub.add_parser("details", help="Details-panel payload for one point.")
    det.add_argument("--id", required=True, type=str, help="Point id")
    _add_source_args(det)
    det.set_defaults(func=_cmd_details)

    click = sub.add_parser("click", help="Zoom-or-details action for a click on a cluster marker.")
    click.add_argument("--cell", required=True, type=int, nargs=2, metavar=("X", "Y"), help="Cluster cell key")
    click.add_argument("--zoom", required=True, type=float, help="Current map zoom level")
    click.add_argument("--cell-size", dest="cell_size", type=float, default=None, help="Cell size in degrees")
    _add_source_args(click)
    click.set_defaults(func=_cmd_click)

    sample = sub.add_parser("sample-nearby", help="Fixed sample listing around nearby.sample_center.")
    _add_source_args(sample)
    sample.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    sample.set_defaults(func=_cmd_sample_nearby)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m pointmap.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    try:
        return int(func(args))
    except InvalidArgument as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
