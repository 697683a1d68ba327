"""
Offline dataset report.

Goal: a deterministic, network-free view of "is this point set sane, and how does
clustering behave on it?". Used by:
- CLI debugging (`pointmap report`)
- the `/api/report` endpoint
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from dataclasses import dataclass
from typing import Any, Sequence

from pointmap.core.clustering import grid_clusters
from pointmap.domain.models import Point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Issue:
    severity: str  # "info" | "warning" | "error"
    code: str
    message: str
    count: int = 1
    sample: list[str] | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity,
            "code": self.code,
            "message": self.message,
            "count": int(self.count),
            "sample": list(self.sample or []),
        }


def dataset_issues(points: Sequence[Point]) -> list[Issue]:
    issues: list[Issue] = []
    if not points:
        issues.append(Issue(severity="warning", code="DATASET_EMPTY", message="Point set is empty.", count=0))
        return issues

    id_counts = Counter(str(p.id) for p in points)
    dup = sorted(i for i, n in id_counts.items() if n > 1)
    if dup:
        issues.append(
            Issue(
                severity="error",
                code="DATASET_DUPLICATE_ID",
                message="Duplicate point ids in dataset.",
                count=len(dup),
                sample=dup[:8],
            )
        )

    no_category = [str(p.id) for p in points if not p.category]
    if no_category:
        issues.append(
            Issue(
                severity="info",
                code="DATASET_MISSING_CATEGORY",
                message="Some points have no `category`.",
                count=len(no_category),
                sample=no_category[:8],
            )
        )
    return issues


def build_dataset_report(points: Sequence[Point], *, cell_size_deg: float, threshold: int = 1000) -> dict[str, Any]:
    """Summarize a point set and time a clustering pass over it.

    `threshold` is the marker-layout clustering threshold; sets above it are labelled
    "optimized" (they render as clusters), the rest "standard".
    """
    start = time.perf_counter()
    clusters = grid_clusters(points, cell_size_deg)
    elapsed_s = time.perf_counter() - start

    sizes = [len(c) for c in clusters]
    category_counts = Counter(p.category for p in points)
    point_count = len(points)

    report = {
        "point_count": point_count,
        "category_counts": dict(sorted(category_counts.items(), key=lambda kv: (-kv[1], kv[0]))),
        "clustering": {
            "cell_size_deg": float(cell_size_deg),
            "cluster_count": len(clusters),
            "largest_cluster": max(sizes, default=0),
            "singletons": sum(1 for s in sizes if s == 1),
        },
        "timing": {
            "cluster_ms": round(elapsed_s * 1000, 3),
            "points_per_second": int(point_count / elapsed_s) if elapsed_s > 0 else None,
        },
        "efficiency": "optimized" if point_count > threshold else "standard",
        "issues": [i.as_dict() for i in dataset_issues(points)],
    }
    logger.info(
        "Dataset report: %d points -> %d clusters in %.2fms",
        point_count,
        len(clusters),
        elapsed_s * 1000,
    )
    return report
