"""Read reference/comparison tracks from GPX files and export simplified ones."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Sequence, Union

import gpxpy
import gpxpy.gpx

from .config import EXPORT_SUFFIX
from .errors import GpxFormatError
from .geometry.models import GeoPoint
from .models import Track

PathLike = Union[str, Path]

LOGGER = logging.getLogger(__name__)


def _to_geo_point(point: gpxpy.gpx.GPXWaypoint) -> GeoPoint:
    return GeoPoint(
        lat=float(point.latitude),
        lon=float(point.longitude),
        time=point.time,
        elevation=None if point.elevation is None else float(point.elevation),
    )


def _join_segments(track: gpxpy.gpx.GPXTrack) -> List[GeoPoint]:
    """Concatenate every segment of a GPX track into one ordered path."""

    return [_to_geo_point(pt) for segment in track.segments for pt in segment.points]


def load_gpx(path: PathLike) -> gpxpy.gpx.GPX:
    """Parse ``path`` as GPX.

    Raises:
        FileNotFoundError: If the file does not exist.
        GpxFormatError: If the file is not valid GPX.
    """

    file_path = Path(path)
    if not file_path.is_file():
        raise FileNotFoundError(f"GPX file not found: {file_path}")
    try:
        with file_path.open("r", encoding="utf-8") as handle:
            return gpxpy.parse(handle)
    except (gpxpy.gpx.GPXException, UnicodeDecodeError) as exc:
        raise GpxFormatError(f"Failed to read {file_path} as GPX: {exc}") from exc


def read_reference(path: PathLike) -> Track:
    """Return the reference path stored in ``path``.

    Uses the first track; falls back to the first route and then to the
    waypoints when the file holds no tracks.
    """

    file_path = Path(path)
    gpx = load_gpx(file_path)
    if gpx.tracks:
        if len(gpx.tracks) > 1:
            LOGGER.warning(
                "Reference %s contains %d tracks; only the first is used. "
                "Please verify that this is the correct track.",
                file_path,
                len(gpx.tracks),
            )
        track = gpx.tracks[0]
        points = _join_segments(track)
        label = track.name or file_path.stem
    elif gpx.routes:
        LOGGER.info("Reference %s has no tracks; using its first route", file_path)
        route = gpx.routes[0]
        points = [_to_geo_point(pt) for pt in route.points]
        label = route.name or file_path.stem
    elif gpx.waypoints:
        LOGGER.info(
            "Reference %s has no tracks or routes; building a path from %d waypoints",
            file_path,
            len(gpx.waypoints),
        )
        points = [_to_geo_point(pt) for pt in gpx.waypoints]
        label = file_path.stem
    else:
        points = []
        label = file_path.stem
    if not points:
        raise GpxFormatError(
            f"Reference {file_path} does not contain any tracks or waypoints"
        )
    return Track(label=label, points=tuple(points), source=str(file_path))


def read_tracks(path: PathLike) -> List[Track]:
    """Return every track in ``path`` as a comparison :class:`Track`."""

    file_path = Path(path)
    gpx = load_gpx(file_path)
    if not gpx.tracks:
        LOGGER.warning("Track file %s contains no tracks", file_path)
    tracks: List[Track] = []
    for index, gpx_track in enumerate(gpx.tracks, start=1):
        points = _join_segments(gpx_track)
        label = gpx_track.name or f"{file_path.stem} #{index}"
        if not points:
            LOGGER.warning("Skipping empty track '%s' in %s", label, file_path)
            continue
        tracks.append(Track(label=label, points=tuple(points), source=str(file_path)))
    return tracks


def read_many(paths: Iterable[PathLike]) -> List[Track]:
    tracks: List[Track] = []
    for path in paths:
        tracks.extend(read_tracks(path))
    return tracks


def export_path_for(source: PathLike) -> Path:
    """Return ``<stem>.modified.gpx`` next to ``source``."""

    source_path = Path(source)
    return source_path.with_name(f"{source_path.stem}{EXPORT_SUFFIX}.gpx")


def tracks_to_gpx(tracks: Sequence[Track]) -> gpxpy.gpx.GPX:
    gpx = gpxpy.gpx.GPX()
    gpx.creator = "path_distance"
    for track in tracks:
        gpx_track = gpxpy.gpx.GPXTrack(name=track.label or None)
        segment = gpxpy.gpx.GPXTrackSegment()
        for point in track.points:
            segment.points.append(
                gpxpy.gpx.GPXTrackPoint(
                    latitude=point.lat,
                    longitude=point.lon,
                    elevation=point.elevation,
                    time=point.time,
                )
            )
        gpx_track.segments.append(segment)
        gpx.tracks.append(gpx_track)
    return gpx


def write_simplified_gpx(source: PathLike, tracks: Sequence[Track]) -> Path:
    """Write simplified ``tracks`` to the export path derived from ``source``."""

    output_path = export_path_for(source)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as handle:
        handle.write(tracks_to_gpx(tracks).to_xml())
    LOGGER.info("Exported simplified track file to %s", output_path)
    return output_path


__all__ = [
    "export_path_for",
    "load_gpx",
    "read_many",
    "read_reference",
    "read_tracks",
    "tracks_to_gpx",
    "write_simplified_gpx",
]
