"""Interactive map overlays of a comparison track against the reference."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import folium  # Using folium to build an interactive Leaflet map.

from .geometry.models import latlon_list
from .geometry.projection import CoordinateProjector
from .models import Track, TrackComparison

PathLike = Union[str, Path]

_REFERENCE_COLOR = "#1a9641"
_TRACK_COLOR = "#2c7bb6"
_SIMPLIFIED_COLOR = "#fdae61"
_DEVIATION_COLOR = "#d73027"


def create_comparison_map(
    reference: Track,
    track: Track,
    comparison: TrackComparison,
    projector: CoordinateProjector,
    *,
    output_html_path: Optional[PathLike] = None,
) -> folium.Map:
    """Create a map showing the reference, the track and its worst deviation.

    Args:
        reference: Reference path as read from GPX.
        track: Raw comparison track.
        comparison: Result of comparing ``track`` against ``reference``.
        projector: Projector used for the comparison; maps the nearest
            reference location back to lat/lon.
        output_html_path: Optional path where the map is saved as HTML.

    Returns:
        The :class:`folium.Map` overlay.
    """

    reference_points = latlon_list(reference.points)
    track_points = latlon_list(track.points)
    folium_map = folium.Map(
        location=projector.center, zoom_start=14, control_scale=True
    )
    folium.PolyLine(
        reference_points,
        color=_REFERENCE_COLOR,
        weight=4,
        opacity=0.8,
        tooltip=f"Reference: {reference.label}",
    ).add_to(folium_map)
    folium.PolyLine(
        track_points,
        color=_TRACK_COLOR,
        weight=4,
        opacity=0.5,
        tooltip=f"Track: {track.label}",
    ).add_to(folium_map)
    simplified_points = latlon_list(comparison.simplified.points)
    if len(simplified_points) >= 2:
        folium.PolyLine(
            simplified_points,
            color=_SIMPLIFIED_COLOR,
            weight=2,
            opacity=0.9,
            dash_array="6",
            tooltip=f"Simplified track ({len(simplified_points)} points)",
        ).add_to(folium_map)

    worst = comparison.worst_deviation
    if worst is not None:
        sample = track_points[worst.index]
        nearest = projector.unproject(*worst.closest.location)
        popup = folium.Popup(
            html=(
                f"<strong>Max deviation:</strong> {worst.closest.distance_m:.1f} m "
                f"(sample {worst.index})"
            ),
            max_width=300,
        )
        folium.PolyLine(
            [sample, nearest], color=_DEVIATION_COLOR, weight=3, opacity=0.9
        ).add_to(folium_map)
        folium.CircleMarker(
            location=sample,
            radius=7,
            color=_DEVIATION_COLOR,
            fill=True,
            fill_color=_DEVIATION_COLOR,
            tooltip="Highest deviation",
            popup=popup,
        ).add_to(folium_map)

    if output_html_path is not None:
        output_path = Path(output_html_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        folium_map.save(str(output_path))

    return folium_map


__all__ = ["create_comparison_map"]
