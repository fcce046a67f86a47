"""GPS path distance package."""

from .main import main
from .models import DistanceReport, SimplifyTarget, Track, TrackComparison
from .errors import GpxFormatError, InvalidInputError, PathDistanceError
from .services import ComparisonService, ComparisonSettings

__all__ = [
    "main",
    "ComparisonService",
    "ComparisonSettings",
    "DistanceReport",
    "GpxFormatError",
    "InvalidInputError",
    "PathDistanceError",
    "SimplifyTarget",
    "Track",
    "TrackComparison",
]
