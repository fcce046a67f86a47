"""Douglas-Peucker path simplification in the projected plane."""

from __future__ import annotations

import logging
import math
from typing import Iterable, List, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from ..errors import InvalidInputError
from .closest_point import point_segment_distances
from .models import MetricArray, as_metric_array

LOGGER = logging.getLogger(__name__)


def _check_epsilon(epsilon_m: float) -> float:
    value = float(epsilon_m)
    if not math.isfinite(value) or value < 0.0:
        raise InvalidInputError(
            f"Simplification epsilon must be a finite, non-negative number of metres (got {epsilon_m})"
        )
    return value


def simplify_indices(
    points: Iterable[Sequence[float]], epsilon_m: float
) -> NDArray[np.intp]:
    """Return the indices of the points kept by Douglas-Peucker.

    Interior points are measured against the chord segment joining the ends of
    their range. When the furthest point lies within ``epsilon_m`` the whole
    range collapses to its endpoints; otherwise the range is split at the first
    furthest point and both halves are processed. Ranges are kept on an
    explicit stack, so arbitrarily long paths never hit the recursion limit.

    Args:
        points: Planar coordinates in metres.
        epsilon_m: Maximum tolerated deviation in metres (``>= 0``).

    Returns:
        Sorted indices into ``points``, always including the first and last
        index when the input is non-empty.

    Raises:
        InvalidInputError: If ``epsilon_m`` is negative or not finite.
    """

    tolerance = _check_epsilon(epsilon_m)
    array = as_metric_array(points)
    count = len(array)
    if count <= 2:
        return np.arange(count, dtype=np.intp)

    keep = np.zeros(count, dtype=bool)
    keep[0] = keep[-1] = True
    stack: List[Tuple[int, int]] = [(0, count - 1)]
    while stack:
        start, end = stack.pop()
        if end - start < 2:
            continue
        distances = point_segment_distances(array[start + 1 : end], array[start], array[end])
        offset = int(np.argmax(distances))
        if distances[offset] <= tolerance:
            continue
        split = start + 1 + offset
        keep[split] = True
        stack.append((split, end))
        stack.append((start, split))
    return np.flatnonzero(keep)


def simplify_points(points: Iterable[Sequence[float]], epsilon_m: float) -> MetricArray:
    """Simplify metric coordinates while preserving endpoints and order."""

    array = as_metric_array(points)
    indices = simplify_indices(array, epsilon_m)
    simplified = array[indices]
    LOGGER.debug(
        "Simplified %d points to %d (epsilon=%.3f m)",
        len(array),
        len(simplified),
        epsilon_m,
    )
    return simplified


__all__ = ["simplify_indices", "simplify_points"]
