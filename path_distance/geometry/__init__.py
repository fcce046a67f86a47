"""Geometric distance engine: projection, simplification and path metrics.

Everything downstream of :class:`CoordinateProjector` works on planar
coordinates in metres held as ``(n, 2)`` numpy arrays.
"""

from .models import ClosestPoint, GeoPoint, LatLon, MetricArray, PlanarPoint
from .projection import CoordinateProjector
from .simplification import simplify_indices, simplify_points
from .closest_point import closest_point, distances_to_path, point_segment_distances
from .averages import (
    average_location_weighted,
    average_time_weighted,
    mean_closest_distance,
)
from .similarity import (
    Deviation,
    directed_hausdorff,
    discrete_frechet_distance,
    discrete_frechet_distance_low_memory,
    furthest_deviation,
    hausdorff_distance,
)

__all__ = [
    "ClosestPoint",
    "CoordinateProjector",
    "Deviation",
    "GeoPoint",
    "LatLon",
    "MetricArray",
    "PlanarPoint",
    "average_location_weighted",
    "average_time_weighted",
    "closest_point",
    "directed_hausdorff",
    "discrete_frechet_distance",
    "discrete_frechet_distance_low_memory",
    "distances_to_path",
    "furthest_deviation",
    "hausdorff_distance",
    "mean_closest_distance",
    "point_segment_distances",
    "simplify_indices",
    "simplify_points",
]
