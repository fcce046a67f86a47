"""Central error types used across the application."""

from __future__ import annotations


class PathDistanceError(RuntimeError):
    """Base error for path distance failures."""


class InvalidInputError(PathDistanceError, ValueError):
    """Raised for empty paths, non-finite coordinates or invalid tolerances."""


class GpxFormatError(PathDistanceError):
    """Raised when a GPX file cannot be parsed or holds no usable points."""


__all__ = [
    "GpxFormatError",
    "InvalidInputError",
    "PathDistanceError",
]
