"""Point-to-polyline distance helpers."""

from __future__ import annotations

from typing import Iterable, Sequence, Tuple

import numpy as np

from .models import ClosestPoint, MetricArray, as_metric_array, require_points

# Upper bound on point/segment pairs evaluated per vectorised block.
_BLOCK_CELLS = 1_000_000


def point_segment_distances(
    points: Iterable[Sequence[float]],
    start: Sequence[float],
    end: Sequence[float],
) -> MetricArray:
    """Distance from each point to the segment ``start``-``end``.

    The projection parameter is clamped to [0, 1], so points beyond either end
    measure to the nearest endpoint. A zero-length segment degrades to plain
    point distance.
    """

    array = as_metric_array(points)
    origin = np.asarray(start, dtype=float)
    vector = np.asarray(end, dtype=float) - origin
    length_sq = float(vector @ vector)
    offsets = array - origin
    if length_sq == 0.0:
        return np.hypot(offsets[:, 0], offsets[:, 1])
    terminus = np.asarray(end, dtype=float)
    t = np.clip((offsets @ vector) / length_sq, 0.0, 1.0)
    t = np.where(np.all(array == terminus, axis=1), 1.0, t)
    nearest = np.where((t >= 1.0)[:, None], terminus, origin + t[:, None] * vector)
    delta = array - nearest
    return np.hypot(delta[:, 0], delta[:, 1])


def _segments(path: MetricArray) -> Tuple[MetricArray, MetricArray, MetricArray]:
    """Return segment starts, ends and squared lengths for a polyline.

    A single-point path is treated as one zero-length segment.
    """

    if len(path) == 1:
        return path, path, np.zeros(1, dtype=float)
    starts = path[:-1]
    ends = path[1:]
    vectors = ends - starts
    return starts, ends, np.einsum("ij,ij->i", vectors, vectors)


def _nearest_on_segments(
    points: MetricArray,
    starts: MetricArray,
    ends: MetricArray,
    length_sq: MetricArray,
) -> Tuple[MetricArray, MetricArray, MetricArray]:
    """Broadcast ``points`` (k) against segments (m); return (k, m) results.

    Returns the clamped parameters, the distances, and the nearest locations.
    """

    vectors = ends - starts
    offsets = points[:, None, :] - starts[None, :, :]
    dots = np.einsum("kmj,mj->km", offsets, vectors)
    safe_length = np.where(length_sq > 0.0, length_sq, 1.0)
    t = np.where(length_sq > 0.0, dots / safe_length, 0.0)
    t = np.clip(t, 0.0, 1.0)
    # Snap to the exact end vertex so distances to shared vertices are exactly 0.
    t = np.where(np.all(points[:, None, :] == ends[None, :, :], axis=-1), 1.0, t)
    nearest = starts[None, :, :] + t[:, :, None] * vectors[None, :, :]
    nearest = np.where((t >= 1.0)[:, :, None], ends[None, :, :], nearest)
    delta = points[:, None, :] - nearest
    distances = np.hypot(delta[..., 0], delta[..., 1])
    return t, distances, nearest


def closest_point(point: Sequence[float], path: Iterable[Sequence[float]]) -> ClosestPoint:
    """Return the nearest location on ``path`` to ``point``."""

    polyline = require_points(path, name="path")
    query = np.asarray(point, dtype=float).reshape(1, 2)
    starts, ends, length_sq = _segments(polyline)
    t, distances, nearest = _nearest_on_segments(query, starts, ends, length_sq)
    index = int(np.argmin(distances[0]))
    location = nearest[0, index]
    return ClosestPoint(
        distance_m=float(distances[0, index]),
        segment_index=index,
        fraction=float(t[0, index]),
        location=(float(location[0]), float(location[1])),
    )


def distances_to_path(
    points: Iterable[Sequence[float]], path: Iterable[Sequence[float]]
) -> MetricArray:
    """Closest distance from every point to the segments of ``path``."""

    queries = require_points(points, name="points")
    polyline = require_points(path, name="path")
    starts, ends, length_sq = _segments(polyline)
    block = max(1, _BLOCK_CELLS // len(starts))
    result = np.empty(len(queries), dtype=float)
    for offset in range(0, len(queries), block):
        chunk = queries[offset : offset + block]
        _, distances, _ = _nearest_on_segments(chunk, starts, ends, length_sq)
        result[offset : offset + len(chunk)] = distances.min(axis=1)
    return result


__all__ = ["closest_point", "distances_to_path", "point_segment_distances"]
