"""Tests for GPX reading and simplified-track export."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import pytest

from path_distance.errors import GpxFormatError
from path_distance.gpx_io import (
    export_path_for,
    read_many,
    read_reference,
    read_tracks,
    write_simplified_gpx,
)
from path_distance.models import Track

from conftest import START_TIME, line_north, make_track


def test_reference_joins_segments_of_first_track(
    write_gpx: Callable[..., Path], caplog: pytest.LogCaptureFixture
) -> None:
    first = line_north(3)
    second = line_north(3, east_m=5.0)
    path = write_gpx(
        "ref.gpx",
        [("Loop", [first[:2], first[2:]]), ("Other", [second])],
    )
    caplog.set_level(logging.WARNING)
    reference = read_reference(path)
    assert reference.label == "Loop"
    assert len(reference.points) == 3
    assert reference.points[0].latlon == pytest.approx(first[0])
    assert reference.points[0].elevation == 12.5
    assert reference.points[0].time == START_TIME
    assert reference.source == str(path)
    assert any("only the first is used" in record.message for record in caplog.records)


def test_reference_falls_back_to_route(write_gpx: Callable[..., Path]) -> None:
    path = write_gpx("route.gpx", route=line_north(4))
    reference = read_reference(path)
    assert reference.label == "Route"
    assert len(reference.points) == 4


def test_reference_falls_back_to_waypoints(write_gpx: Callable[..., Path]) -> None:
    path = write_gpx("wpts.gpx", waypoints=line_north(5))
    reference = read_reference(path)
    assert reference.label == "wpts"
    assert len(reference.points) == 5
    assert reference.points[0].time is None


def test_reference_without_points_is_an_error(write_gpx: Callable[..., Path]) -> None:
    path = write_gpx("empty.gpx")
    with pytest.raises(GpxFormatError):
        read_reference(path)


def test_read_tracks_labels_unnamed_tracks(write_gpx: Callable[..., Path]) -> None:
    path = write_gpx(
        "runs.gpx",
        [("Morning", [line_north(3)]), (None, [line_north(2)]), ("Blank", [])],
    )
    tracks = read_tracks(path)
    assert [track.label for track in tracks] == ["Morning", "runs #2"]
    assert [len(track.points) for track in tracks] == [3, 2]


def test_read_many_concatenates_files(write_gpx: Callable[..., Path]) -> None:
    a = write_gpx("a.gpx", [("A", [line_north(2)])])
    b = write_gpx("b.gpx", [("B1", [line_north(2)]), ("B2", [line_north(3)])])
    assert [track.label for track in read_many([a, b])] == ["A", "B1", "B2"]


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        read_tracks(tmp_path / "missing.gpx")


def test_invalid_xml_raises_format_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.gpx"
    path.write_text("this is not <gpx", encoding="utf-8")
    with pytest.raises(GpxFormatError):
        read_tracks(path)


def test_non_utf8_file_raises_format_error(tmp_path: Path) -> None:
    path = tmp_path / "binary.gpx"
    path.write_bytes(b"\xff\xfe\x00garbage\x80\x81")
    with pytest.raises(GpxFormatError):
        read_tracks(path)


def test_export_path_inserts_modified_suffix() -> None:
    assert export_path_for(Path("/data/run.gpx")) == Path("/data/run.modified.gpx")


def test_simplified_export_round_trip(tmp_path: Path) -> None:
    source = tmp_path / "activity.gpx"
    track = make_track([(0.0, 0.0), (4.0, 10.0), (0.0, 20.0)], label="Evening")
    output = write_simplified_gpx(source, [track])
    assert output == tmp_path / "activity.modified.gpx"
    (restored,) = read_tracks(output)
    assert restored.label == "Evening"
    assert len(restored.points) == 3
    for original, copy in zip(track.points, restored.points):
        assert copy.lat == pytest.approx(original.lat, abs=1e-6)
        assert copy.lon == pytest.approx(original.lon, abs=1e-6)
        assert copy.time == original.time
        assert copy.elevation == pytest.approx(original.elevation)


def test_export_accepts_track_without_label(tmp_path: Path) -> None:
    track = Track(label="", points=make_track([(0.0, 0.0), (0.0, 5.0)]).points)
    output = write_simplified_gpx(tmp_path / "x.gpx", [track])
    (restored,) = read_tracks(output)
    assert restored.label == "x.modified #1"
