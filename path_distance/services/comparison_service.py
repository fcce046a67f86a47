"""Track comparison service.

Projects and simplifies the reference path once, then runs every comparison
track through projection, simplification and the four distance metrics. Tracks
share nothing but the read-only reference artefacts, so they are processed in
parallel on a thread pool.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
import logging
from typing import Dict, List, Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from ..config import (
    FRECHET_LOW_MEMORY_CELLS,
    MAX_WORKERS,
    SIMPLIFY_EPSILON_M,
    SIMPLIFY_TARGET,
)
from ..geometry.averages import average_time_weighted, mean_closest_distance
from ..geometry.models import MetricArray, validate_geo_points
from ..geometry.projection import CoordinateProjector
from ..geometry.similarity import (
    discrete_frechet_distance,
    discrete_frechet_distance_low_memory,
    furthest_deviation,
    hausdorff_distance,
)
from ..geometry.simplification import simplify_indices
from ..models import DistanceReport, SimplifyTarget, Track, TrackComparison

LOGGER = logging.getLogger(__name__)


def _default_simplify_target() -> SimplifyTarget:
    try:
        return SimplifyTarget(SIMPLIFY_TARGET)
    except ValueError:
        LOGGER.warning(
            "Unknown simplify target %r in configuration; using 'none'",
            SIMPLIFY_TARGET,
        )
        return SimplifyTarget.NONE


@dataclass(slots=True)
class ComparisonSettings:
    epsilon_m: float = SIMPLIFY_EPSILON_M
    simplify_target: SimplifyTarget = field(default_factory=_default_simplify_target)
    max_workers: int = MAX_WORKERS
    frechet_low_memory_cells: int = FRECHET_LOW_MEMORY_CELLS
    logger: logging.Logger | None = None


@dataclass(frozen=True, slots=True)
class PreparedReference:
    """Reference artefacts shared read-only by every track worker."""

    track: Track
    projector: CoordinateProjector
    metric_points: MetricArray
    simplified_points: MetricArray

    def points_for(self, target: SimplifyTarget) -> MetricArray:
        if target.simplifies_reference:
            return self.simplified_points
        return self.metric_points


def prepare_reference(reference: Track, epsilon_m: float) -> PreparedReference:
    """Project the reference once and simplify it once."""

    validate_geo_points(reference.points, name=f"reference '{reference.label}'")
    projector = CoordinateProjector.from_points(reference.points)
    metric = projector.project_path(reference.points)
    simplified = metric[simplify_indices(metric, epsilon_m)]
    return PreparedReference(
        track=reference,
        projector=projector,
        metric_points=metric,
        simplified_points=simplified,
    )


def _subset(track: Track, indices: NDArray[np.intp]) -> Track:
    return Track(
        label=track.label,
        points=tuple(track.points[int(i)] for i in indices),
        source=track.source,
    )


def simplify_track(
    track: Track, projector: CoordinateProjector, epsilon_m: float
) -> Track:
    """Return the subset of ``track`` samples kept by Douglas-Peucker."""

    validate_geo_points(track.points, name=f"track '{track.label}'")
    return _subset(
        track, simplify_indices(projector.project_path(track.points), epsilon_m)
    )


def compare_track(
    reference: PreparedReference,
    track: Track,
    *,
    epsilon_m: float,
    simplify_target: SimplifyTarget = SimplifyTarget.NONE,
    frechet_low_memory_cells: int = FRECHET_LOW_MEMORY_CELLS,
) -> TrackComparison:
    """Compute the four distance metrics of ``track`` against ``reference``."""

    metric = reference.projector.project_path(track.points)
    indices = simplify_indices(metric, epsilon_m)
    simplified_metric = metric[indices]
    reference_points = reference.points_for(simplify_target)
    shape_points = simplified_metric if simplify_target.simplifies_track else metric

    cells = len(shape_points) * len(reference_points)
    if cells > frechet_low_memory_cells:
        frechet = discrete_frechet_distance_low_memory(shape_points, reference_points)
    else:
        frechet = discrete_frechet_distance(shape_points, reference_points)

    report = DistanceReport(
        label=track.label,
        time_weighted_average_m=average_time_weighted(reference_points, metric),
        location_weighted_average_m=mean_closest_distance(
            reference_points, simplified_metric
        ),
        frechet_m=frechet,
        hausdorff_m=hausdorff_distance(shape_points, reference_points),
        point_count=len(metric),
        simplified_point_count=len(simplified_metric),
        source=track.source,
    )
    simplified_track = _subset(track, indices)
    diagnostics: Dict[str, object] = {
        "simplify_target": simplify_target.value,
        "epsilon_m": epsilon_m,
        "reference_point_count": len(reference_points),
        "frechet_cells": cells,
    }
    return TrackComparison(
        report=report,
        simplified=simplified_track,
        worst_deviation=furthest_deviation(metric, reference_points),
        diagnostics=diagnostics,
    )


class ComparisonService:
    def __init__(self, settings: ComparisonSettings | None = None):
        self.settings = settings or ComparisonSettings()
        self._log = self.settings.logger or logging.getLogger(self.__class__.__name__)

    def compare(
        self, reference: Track, tracks: Sequence[Track]
    ) -> List[TrackComparison]:
        """Compare every track against ``reference``; results keep input order.

        Raises:
            InvalidInputError: If any path is empty or holds invalid
                coordinates, or the epsilon is invalid. Raised before any
                metric is computed.
        """

        prepared = prepare_reference(reference, self.settings.epsilon_m)
        return self.compare_prepared(prepared, tracks)

    def compare_prepared(
        self, prepared: PreparedReference, tracks: Sequence[Track]
    ) -> List[TrackComparison]:
        """Compare tracks against an already projected and simplified reference."""

        for track in tracks:
            validate_geo_points(track.points, name=f"track '{track.label}'")
        settings = self.settings
        reference = prepared.track
        if not tracks:
            return []
        self._log.info(
            "Comparing %d track(s) against reference '%s' (%d points, %d simplified)",
            len(tracks),
            reference.label,
            len(prepared.metric_points),
            len(prepared.simplified_points),
        )
        self._log.debug(
            "Projection centre %s; epsilon=%.3f m; simplify=%s",
            prepared.projector.center,
            settings.epsilon_m,
            settings.simplify_target.value,
        )

        def run(track: Track) -> TrackComparison:
            return compare_track(
                prepared,
                track,
                epsilon_m=settings.epsilon_m,
                simplify_target=settings.simplify_target,
                frechet_low_memory_cells=settings.frechet_low_memory_cells,
            )

        workers = min(max(1, settings.max_workers), len(tracks))
        results: List[Optional[TrackComparison]] = [None] * len(tracks)
        if workers == 1:
            for index, track in enumerate(tracks):
                results[index] = run(track)
                self._log_result(results[index])
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                future_map = {
                    executor.submit(run, track): index
                    for index, track in enumerate(tracks)
                }
                for future in as_completed(future_map):
                    index = future_map[future]
                    results[index] = future.result()
                    self._log_result(results[index])
        return [result for result in results if result is not None]

    def _log_result(self, comparison: Optional[TrackComparison]) -> None:
        if comparison is None:
            return
        report = comparison.report
        self._log.debug(
            "Track '%s': original points=%d simplified points=%d",
            report.label,
            report.point_count,
            report.simplified_point_count,
        )


__all__ = [
    "ComparisonService",
    "ComparisonSettings",
    "PreparedReference",
    "compare_track",
    "prepare_reference",
    "simplify_track",
]
