"""Benchmark the distance metrics with large synthetic tracks."""

from __future__ import annotations

import argparse
import math
import statistics
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Late imports rely on the adjusted sys.path above.
from path_distance.config import SIMPLIFY_EPSILON_M  # noqa: E402
from path_distance.geometry.averages import (  # noqa: E402
    average_location_weighted,
    average_time_weighted,
)
from path_distance.geometry.models import GeoPoint  # noqa: E402
from path_distance.geometry.projection import CoordinateProjector  # noqa: E402
from path_distance.geometry.similarity import (  # noqa: E402
    discrete_frechet_distance,
    hausdorff_distance,
)
from path_distance.geometry.simplification import simplify_indices  # noqa: E402


@dataclass(slots=True)
class StageDurations:
    """Timing measurements (in seconds) for one comparison."""

    project: float
    simplify: float
    averages: float
    hausdorff: float
    frechet: float

    @property
    def total(self) -> float:
        return self.project + self.simplify + self.averages + self.hausdorff + self.frechet


@dataclass(slots=True)
class BenchmarkSummary:
    point_count: int
    iterations: int
    simplified_point_count: int
    mean_project_ms: float
    mean_simplify_ms: float
    mean_averages_ms: float
    mean_hausdorff_ms: float
    mean_frechet_ms: float
    mean_total_ms: float
    worst_total_ms: float


def _build_path(point_count: int, offset_deg: float = 0.0) -> List[GeoPoint]:
    """Generate a gently winding lat/lon path with evenly spaced points."""

    base_lat = 51.48
    base_lon = -3.18
    step_deg = 2.5e-5
    return [
        GeoPoint(
            lat=base_lat + idx * step_deg,
            lon=base_lon + offset_deg + 4e-4 * math.sin(idx / 50.0),
        )
        for idx in range(point_count)
    ]


def _run_iteration(reference: List[GeoPoint], track: List[GeoPoint]) -> tuple[StageDurations, int]:
    start = time.perf_counter()
    projector = CoordinateProjector.from_points(reference)
    reference_xy = projector.project_path(reference)
    track_xy = projector.project_path(track)
    project = time.perf_counter() - start

    start = time.perf_counter()
    kept = simplify_indices(track_xy, SIMPLIFY_EPSILON_M)
    simplify = time.perf_counter() - start

    start = time.perf_counter()
    average_time_weighted(reference_xy, track_xy)
    average_location_weighted(reference_xy, track_xy, SIMPLIFY_EPSILON_M)
    averages = time.perf_counter() - start

    start = time.perf_counter()
    hausdorff_distance(track_xy, reference_xy)
    hausdorff = time.perf_counter() - start

    start = time.perf_counter()
    discrete_frechet_distance(track_xy, reference_xy)
    frechet = time.perf_counter() - start

    durations = StageDurations(
        project=project,
        simplify=simplify,
        averages=averages,
        hausdorff=hausdorff,
        frechet=frechet,
    )
    return durations, len(kept)


def run_benchmark(point_count: int, iterations: int) -> BenchmarkSummary:
    """Time every metric on a reference and an offset track of ``point_count`` samples."""

    if point_count < 2:
        raise ValueError("point_count must be at least 2")
    if iterations <= 0:
        raise ValueError("iterations must be positive")

    reference = _build_path(point_count)
    track = _build_path(point_count, offset_deg=5e-5)

    durations: List[StageDurations] = []
    simplified_count = 0
    for _ in range(iterations):
        item, simplified_count = _run_iteration(reference, track)
        durations.append(item)

    def mean_ms(values) -> float:
        return statistics.fmean(values) * 1000.0

    return BenchmarkSummary(
        point_count=point_count,
        iterations=iterations,
        simplified_point_count=simplified_count,
        mean_project_ms=mean_ms(item.project for item in durations),
        mean_simplify_ms=mean_ms(item.simplify for item in durations),
        mean_averages_ms=mean_ms(item.averages for item in durations),
        mean_hausdorff_ms=mean_ms(item.hausdorff for item in durations),
        mean_frechet_ms=mean_ms(item.frechet for item in durations),
        mean_total_ms=mean_ms(item.total for item in durations),
        worst_total_ms=max(item.total for item in durations) * 1000.0,
    )


def _format_summary(summary: BenchmarkSummary) -> Dict[str, float]:
    return {
        "point_count": summary.point_count,
        "iterations": summary.iterations,
        "simplified_point_count": summary.simplified_point_count,
        "mean_project_ms": summary.mean_project_ms,
        "mean_simplify_ms": summary.mean_simplify_ms,
        "mean_averages_ms": summary.mean_averages_ms,
        "mean_hausdorff_ms": summary.mean_hausdorff_ms,
        "mean_frechet_ms": summary.mean_frechet_ms,
        "mean_total_ms": summary.mean_total_ms,
        "worst_total_ms": summary.worst_total_ms,
    }


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Benchmark the path distance metrics with large tracks",
    )
    parser.add_argument(
        "--points",
        type=int,
        default=3000,
        help="Number of points in the synthetic reference and track",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=5,
        help="Number of repetitions for averaging",
    )
    return parser.parse_args()


def main() -> None:
    """Entry point when running the module as a script."""

    args = _parse_args()
    summary = run_benchmark(args.points, args.iterations)
    for key, value in _format_summary(summary).items():
        if key in {"point_count", "iterations", "simplified_point_count"}:
            print(f"{key}: {value}")
        else:
            print(f"{key}: {value:.3f}")


if __name__ == "__main__":
    main()
