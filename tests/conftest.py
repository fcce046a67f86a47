"""Global pytest fixtures & helpers.

Adds project root to path and provides reusable planar paths, geographic
tracks and a GPX file factory shared across test modules.
"""
from __future__ import annotations

import math
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from path_distance.geometry.models import GeoPoint
from path_distance.models import Track

BASE_LAT = 51.4800
BASE_LON = -3.1800
START_TIME = datetime(2024, 5, 1, 10, 0, 0, tzinfo=timezone.utc)


# --- Factory helpers -------------------------------------------------
def metres_to_lat(metres: float) -> float:
    return metres / 111_320.0


def metres_to_lon(metres: float, lat: float = BASE_LAT) -> float:
    return metres / (111_320.0 * math.cos(math.radians(lat)))


def make_track(
    offsets_m: Sequence[Tuple[float, float]],
    *,
    label: str = "track",
    source: Optional[str] = None,
) -> Track:
    """Build a track from (east, north) offsets in metres around the base point."""

    points = tuple(
        GeoPoint(
            lat=BASE_LAT + metres_to_lat(north),
            lon=BASE_LON + metres_to_lon(east),
            time=START_TIME + timedelta(seconds=index),
            elevation=10.0 + index,
        )
        for index, (east, north) in enumerate(offsets_m)
    )
    return Track(label=label, points=points, source=source)


def random_walk(count: int, *, seed: int = 7, step_m: float = 5.0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    steps = rng.normal(scale=step_m, size=(count, 2))
    return np.cumsum(steps, axis=0)


def gpx_document(
    tracks: Sequence[Tuple[Optional[str], List[List[Tuple[float, float]]]]] = (),
    *,
    waypoints: Sequence[Tuple[float, float]] = (),
    route: Sequence[Tuple[float, float]] = (),
) -> str:
    """Return GPX XML with ``tracks`` given as (name, [segment points])."""

    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<gpx version="1.1" creator="tests" xmlns="http://www.topografix.com/GPX/1/1">',
    ]
    for lat, lon in waypoints:
        lines.append(f'  <wpt lat="{lat}" lon="{lon}"></wpt>')
    if route:
        lines.append("  <rte><name>Route</name>")
        for lat, lon in route:
            lines.append(f'    <rtept lat="{lat}" lon="{lon}"></rtept>')
        lines.append("  </rte>")
    for name, segments in tracks:
        lines.append("  <trk>")
        if name:
            lines.append(f"    <name>{name}</name>")
        for segment in segments:
            lines.append("    <trkseg>")
            for index, (lat, lon) in enumerate(segment):
                stamp = (START_TIME + timedelta(seconds=index)).strftime("%Y-%m-%dT%H:%M:%SZ")
                lines.append(
                    f'      <trkpt lat="{lat}" lon="{lon}"><ele>12.5</ele><time>{stamp}</time></trkpt>'
                )
            lines.append("    </trkseg>")
        lines.append("  </trk>")
    lines.append("</gpx>")
    return "\n".join(lines)


def line_north(count: int, *, east_m: float = 0.0, spacing_m: float = 10.0):
    """Return lat/lon pairs heading due north from the base point."""

    return [
        (BASE_LAT + metres_to_lat(i * spacing_m), BASE_LON + metres_to_lon(east_m))
        for i in range(count)
    ]


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def straight_segment() -> np.ndarray:
    return np.array([[0.0, 0.0], [0.0, 100.0]])


@pytest.fixture
def zigzag() -> np.ndarray:
    return np.array(
        [[0.0, 0.0], [10.0, 4.0], [20.0, -3.0], [30.0, 5.0], [40.0, 0.2], [50.0, 0.0]]
    )


@pytest.fixture
def reference_track() -> Track:
    return make_track([(0.0, n * 10.0) for n in range(21)], label="Reference")


@pytest.fixture
def write_gpx(tmp_path: Path) -> Callable[..., Path]:
    def _write(name: str, *args, **kwargs) -> Path:
        path = tmp_path / name
        path.write_text(gpx_document(*args, **kwargs), encoding="utf-8")
        return path

    return _write
