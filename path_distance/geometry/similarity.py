"""Shape similarity metrics between two planar paths."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import numpy as np

from .closest_point import closest_point, distances_to_path
from .models import ClosestPoint, MetricArray, require_points


@dataclass(frozen=True, slots=True)
class Deviation:
    """The sample of one path lying furthest from another path."""

    index: int
    closest: ClosestPoint


def directed_hausdorff(
    source: Iterable[Sequence[float]], target: Iterable[Sequence[float]]
) -> float:
    """Largest distance from a point of ``source`` to the segments of ``target``."""

    return float(np.max(distances_to_path(source, target)))


def hausdorff_distance(
    first: Iterable[Sequence[float]], second: Iterable[Sequence[float]]
) -> float:
    """Symmetric Hausdorff distance measured against segments, not vertices.

    A single outlier in either path dominates the result: this is the worst
    case divergence, not the typical one.
    """

    a = require_points(first, name="first path")
    b = require_points(second, name="second path")
    return max(directed_hausdorff(a, b), directed_hausdorff(b, a))


def furthest_deviation(
    source: Iterable[Sequence[float]], target: Iterable[Sequence[float]]
) -> Deviation:
    """Locate the ``source`` sample realising the directed Hausdorff distance."""

    a = require_points(source, name="source path")
    b = require_points(target, name="target path")
    index = int(np.argmax(distances_to_path(a, b)))
    return Deviation(index=index, closest=closest_point(a[index], b))


def _frechet_row(distances: List[float], previous: Optional[List[float]]) -> List[float]:
    """Advance the coupling recurrence by one row of the table."""

    row = [0.0] * len(distances)
    if previous is None:
        running = distances[0]
        for j, dist in enumerate(distances):
            running = max(running, dist)
            row[j] = running
        return row
    row[0] = max(previous[0], distances[0])
    for j in range(1, len(distances)):
        row[j] = max(min(previous[j], previous[j - 1], row[j - 1]), distances[j])
    return row


def _row_distances(point: MetricArray, path: MetricArray) -> List[float]:
    delta = path - point
    return np.hypot(delta[:, 0], delta[:, 1]).tolist()


def discrete_frechet_table(
    first: Iterable[Sequence[float]], second: Iterable[Sequence[float]]
) -> MetricArray:
    """Return the full coupling table as a flat row-major array.

    Cell ``i * len(second) + j`` holds the discrete Fréchet distance between
    the prefixes ``first[: i + 1]`` and ``second[: j + 1]``.
    """

    a = require_points(first, name="first path")
    b = require_points(second, name="second path")
    n, m = len(a), len(b)
    table = np.empty(n * m, dtype=float)
    previous: Optional[List[float]] = None
    for i in range(n):
        row = _frechet_row(_row_distances(a[i], b), previous)
        table[i * m : (i + 1) * m] = row
        previous = row
    return table


def discrete_frechet_distance(
    first: Iterable[Sequence[float]], second: Iterable[Sequence[float]]
) -> float:
    """Compute the discrete Fréchet distance between two sequences of points.

    Order sensitive: a path traversed in reverse scores badly even when the
    point sets coincide. Memory is ``O(len(first) * len(second))``; see
    :func:`discrete_frechet_distance_low_memory` for long paths.
    """

    table = discrete_frechet_table(first, second)
    return float(table[-1])


def discrete_frechet_distance_low_memory(
    first: Iterable[Sequence[float]], second: Iterable[Sequence[float]]
) -> float:
    """Same result as :func:`discrete_frechet_distance` keeping only two rows."""

    a = require_points(first, name="first path")
    b = require_points(second, name="second path")
    row = _frechet_row(_row_distances(a[0], b), None)
    for point in a[1:]:
        row = _frechet_row(_row_distances(point, b), row)
    return float(row[-1])


__all__ = [
    "Deviation",
    "directed_hausdorff",
    "discrete_frechet_distance",
    "discrete_frechet_distance_low_memory",
    "discrete_frechet_table",
    "furthest_deviation",
    "hausdorff_distance",
]
