"""Service layer orchestrating reference preparation and track comparison."""

from .comparison_service import (
    ComparisonService,
    ComparisonSettings,
    PreparedReference,
    compare_track,
    prepare_reference,
    simplify_track,
)

__all__ = [
    "ComparisonService",
    "ComparisonSettings",
    "PreparedReference",
    "compare_track",
    "prepare_reference",
    "simplify_track",
]
