"""Dataclasses describing geographic and planar path geometry."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import math
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from ..errors import InvalidInputError

MetricArray = NDArray[np.float64]
LatLon = Tuple[float, float]


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """A single WGS84 sample read from a GPS recording."""

    lat: float
    lon: float
    time: Optional[datetime] = None
    elevation: Optional[float] = None

    @property
    def latlon(self) -> LatLon:
        return (self.lat, self.lon)


class PlanarPoint(NamedTuple):
    """Coordinates in metres within a local projection frame."""

    x: float
    y: float


@dataclass(frozen=True, slots=True)
class ClosestPoint:
    """Nearest location on a polyline relative to a query point.

    ``location`` is a plain ``(x, y)`` pair in the frame of the queried path.
    """

    distance_m: float
    segment_index: int
    fraction: float
    location: Tuple[float, float]


def validate_geo_points(points: Sequence[GeoPoint], *, name: str = "path") -> None:
    """Fail fast on empty paths and out-of-range or non-finite coordinates."""

    if not points:
        raise InvalidInputError(f"{name} contains no points")
    for index, point in enumerate(points):
        if not (math.isfinite(point.lat) and math.isfinite(point.lon)):
            raise InvalidInputError(
                f"{name} point {index} has a non-finite coordinate "
                f"({point.lat}, {point.lon})"
            )
        if not -90.0 <= point.lat <= 90.0:
            raise InvalidInputError(
                f"{name} point {index} latitude {point.lat} is outside [-90, 90]"
            )
        if not -180.0 <= point.lon <= 180.0:
            raise InvalidInputError(
                f"{name} point {index} longitude {point.lon} is outside [-180, 180]"
            )


def as_metric_array(points: Iterable[Sequence[float]]) -> MetricArray:
    """Convert an arbitrary iterable of 2D coordinates into a float64 array."""

    if isinstance(points, np.ndarray):
        array = np.asarray(points, dtype=float)
    else:
        array = np.asarray(list(points), dtype=float)
    if array.size == 0:
        return np.empty((0, 2), dtype=float)
    if array.ndim != 2 or array.shape[1] != 2:
        raise InvalidInputError("Expected a sequence of 2D coordinates")
    return array


def require_points(points: Iterable[Sequence[float]], *, name: str) -> MetricArray:
    """Return a metric array, raising when it is empty or not finite."""

    array = as_metric_array(points)
    if len(array) == 0:
        raise InvalidInputError(f"{name} contains no points")
    if not np.isfinite(array).all():
        raise InvalidInputError(f"{name} contains non-finite coordinates")
    return array


def latlon_list(points: Iterable[GeoPoint]) -> List[LatLon]:
    return [point.latlon for point in points]


__all__ = [
    "ClosestPoint",
    "GeoPoint",
    "LatLon",
    "MetricArray",
    "PlanarPoint",
    "as_metric_array",
    "latlon_list",
    "require_points",
    "validate_geo_points",
]
