"""Average closest-point distance between a track and a reference path."""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np

from .closest_point import distances_to_path
from .models import require_points
from .simplification import simplify_points


def mean_closest_distance(
    reference: Iterable[Sequence[float]],
    samples: Iterable[Sequence[float]],
) -> float:
    """Mean closest distance of ``samples`` to the segments of ``reference``."""

    points = require_points(samples, name="track")
    return float(np.mean(distances_to_path(points, reference)))


def average_time_weighted(
    reference: Iterable[Sequence[float]],
    track: Iterable[Sequence[float]],
) -> float:
    """Mean closest distance of every raw track sample to ``reference``.

    Densely sampled stretches (a runner standing still, say) contribute many
    near-identical samples and pull the mean toward their own distance.
    """

    return mean_closest_distance(reference, track)


def average_location_weighted(
    reference: Iterable[Sequence[float]],
    track: Iterable[Sequence[float]],
    epsilon_m: float,
) -> float:
    """Mean closest distance over the Douglas-Peucker simplified track.

    Stationary periods collapse to one or a few representative points, so the
    result depends on the shape of the track rather than its sampling rate.
    """

    samples = require_points(track, name="track")
    return mean_closest_distance(reference, simplify_points(samples, epsilon_m))


__all__ = [
    "average_location_weighted",
    "average_time_weighted",
    "mean_closest_distance",
]
