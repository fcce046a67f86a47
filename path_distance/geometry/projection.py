"""Flatten WGS84 coordinates into a local metric plane.

The projector is an azimuthal equidistant projection centred on the centroid
of the reference path. Euclidean distances in that plane are accurate to well
under a metre for points within a few hundred kilometres of the centre. Beyond
roughly 500 km the distortion grows without bound; nothing checks for this, so
callers comparing paths that far apart must not rely on the results.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np
from pyproj import CRS, Transformer

from ..errors import InvalidInputError
from .models import GeoPoint, LatLon, MetricArray, PlanarPoint, validate_geo_points

_WGS84 = CRS.from_epsg(4326)


class CoordinateProjector:
    """Project lat/lon points into a plane centred near the input data.

    Instances hold no mutable state after construction, so a single projector
    can be shared read-only between worker threads. Planar coordinates from
    two projectors with different centres are not comparable.
    """

    __slots__ = ("_center", "_crs", "_forward", "_inverse")

    def __init__(self, center_lat: float, center_lon: float) -> None:
        if not (math.isfinite(center_lat) and math.isfinite(center_lon)):
            raise InvalidInputError("Projection centre must be finite")
        self._center: LatLon = (float(center_lat), float(center_lon))
        self._crs = CRS.from_proj4(
            f"+proj=aeqd +lat_0={self._center[0]} +lon_0={self._center[1]} "
            "+x_0=0 +y_0=0 +datum=WGS84 +units=m +no_defs"
        )
        self._forward = Transformer.from_crs(_WGS84, self._crs, always_xy=True)
        self._inverse = Transformer.from_crs(self._crs, _WGS84, always_xy=True)

    @classmethod
    def from_points(cls, points: Sequence[GeoPoint]) -> "CoordinateProjector":
        """Build a projector centred on the arithmetic mean of ``points``."""

        validate_geo_points(points, name="reference path")
        mean_lat = float(np.mean([pt.lat for pt in points]))
        mean_lon = float(np.mean([pt.lon for pt in points]))
        return cls(mean_lat, mean_lon)

    @property
    def center(self) -> LatLon:
        return self._center

    def project(self, point: GeoPoint) -> PlanarPoint:
        """Return the planar coordinates of a single point."""

        if not (math.isfinite(point.lat) and math.isfinite(point.lon)):
            raise InvalidInputError(
                f"Cannot project non-finite coordinate ({point.lat}, {point.lon})"
            )
        x, y = self._forward.transform(point.lon, point.lat)
        return PlanarPoint(float(x), float(y))

    def project_path(self, points: Sequence[GeoPoint]) -> MetricArray:
        """Project a whole path, returning an ``(n, 2)`` array in metres."""

        validate_geo_points(points)
        lats = np.asarray([pt.lat for pt in points], dtype=float)
        lons = np.asarray([pt.lon for pt in points], dtype=float)
        xs, ys = self._forward.transform(lons, lats)
        return np.column_stack((xs, ys)).astype(float, copy=False)

    def unproject(self, x: float, y: float) -> LatLon:
        """Map planar coordinates back to ``(lat, lon)``."""

        lon, lat = self._inverse.transform(x, y)
        return (float(lat), float(lon))

    def unproject_path(self, points: MetricArray) -> Tuple[LatLon, ...]:
        if len(points) == 0:
            return ()
        lons, lats = self._inverse.transform(points[:, 0], points[:, 1])
        return tuple((float(lat), float(lon)) for lat, lon in zip(lats, lons))

    def __repr__(self) -> str:
        return f"CoordinateProjector(center_lat={self._center[0]!r}, center_lon={self._center[1]!r})"


__all__ = ["CoordinateProjector"]
