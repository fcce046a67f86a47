"""Tests for the local metric projection."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import math

import numpy as np
import pytest
from pyproj import Geod

from path_distance.errors import InvalidInputError
from path_distance.geometry.models import GeoPoint, PlanarPoint
from path_distance.geometry.projection import CoordinateProjector

from conftest import BASE_LAT, BASE_LON, metres_to_lat, metres_to_lon

_GEOD = Geod(ellps="WGS84")


def _geodesic(a: GeoPoint, b: GeoPoint) -> float:
    _, _, distance = _GEOD.inv(a.lon, a.lat, b.lon, b.lat)
    return float(distance)


def test_centre_projects_to_origin() -> None:
    projector = CoordinateProjector(BASE_LAT, BASE_LON)
    point = projector.project(GeoPoint(BASE_LAT, BASE_LON))
    assert isinstance(point, PlanarPoint)
    assert point.x == pytest.approx(0.0, abs=1e-6)
    assert point.y == pytest.approx(0.0, abs=1e-6)


def test_from_points_uses_centroid() -> None:
    points = [GeoPoint(10.0, 20.0), GeoPoint(12.0, 24.0)]
    projector = CoordinateProjector.from_points(points)
    assert projector.center == pytest.approx((11.0, 22.0))


@pytest.mark.parametrize("offset_km", [0.0, 50.0, 200.0])
def test_planar_distance_matches_geodesic(offset_km: float) -> None:
    """Segments within a few hundred km of the centre keep metre accuracy."""

    projector = CoordinateProjector(BASE_LAT, BASE_LON)
    start = GeoPoint(BASE_LAT + metres_to_lat(offset_km * 1000.0), BASE_LON)
    end = GeoPoint(
        start.lat + metres_to_lat(600.0), start.lon + metres_to_lon(800.0, start.lat)
    )
    a = projector.project(start)
    b = projector.project(end)
    planar = math.hypot(a.x - b.x, a.y - b.y)
    assert planar == pytest.approx(_geodesic(start, end), abs=0.5)


def test_repeated_projection_is_bit_identical() -> None:
    projector = CoordinateProjector(BASE_LAT, BASE_LON)
    point = GeoPoint(BASE_LAT + 0.01, BASE_LON - 0.02)
    assert projector.project(point) == projector.project(point)


def test_project_path_shape_and_unproject_round_trip() -> None:
    points = [GeoPoint(BASE_LAT + i * 1e-3, BASE_LON + i * 2e-3) for i in range(5)]
    projector = CoordinateProjector.from_points(points)
    metric = projector.project_path(points)
    assert metric.shape == (5, 2)
    restored = projector.unproject_path(metric)
    for original, (lat, lon) in zip(points, restored):
        assert lat == pytest.approx(original.lat, abs=1e-9)
        assert lon == pytest.approx(original.lon, abs=1e-9)
    lat, lon = projector.unproject(*metric[2])
    assert (lat, lon) == pytest.approx(points[2].latlon, abs=1e-9)


def test_empty_reference_is_rejected() -> None:
    with pytest.raises(InvalidInputError):
        CoordinateProjector.from_points([])


@pytest.mark.parametrize(
    "point",
    [
        GeoPoint(float("nan"), 0.0),
        GeoPoint(0.0, float("inf")),
        GeoPoint(91.0, 0.0),
        GeoPoint(0.0, -181.0),
    ],
)
def test_invalid_coordinates_are_rejected(point: GeoPoint) -> None:
    projector = CoordinateProjector(BASE_LAT, BASE_LON)
    with pytest.raises(InvalidInputError):
        projector.project_path([GeoPoint(BASE_LAT, BASE_LON), point])


def test_non_finite_centre_is_rejected() -> None:
    with pytest.raises(InvalidInputError):
        CoordinateProjector(float("nan"), 0.0)


def test_shared_projector_is_consistent_across_threads() -> None:
    projector = CoordinateProjector(BASE_LAT, BASE_LON)
    batches = [
        [GeoPoint(BASE_LAT + i * 1e-4 + j * 1e-5, BASE_LON) for i in range(200)]
        for j in range(8)
    ]
    sequential = [projector.project_path(batch) for batch in batches]
    with ThreadPoolExecutor(max_workers=4) as executor:
        parallel = list(executor.map(projector.project_path, batches))
    for expected, actual in zip(sequential, parallel):
        np.testing.assert_array_equal(expected, actual)
