from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .geometry.models import GeoPoint
from .geometry.similarity import Deviation


class SimplifyTarget(str, Enum):
    """Which paths feed their simplified form into the metrics."""

    NONE = "none"
    TRACK = "track"
    REFERENCE = "reference"
    BOTH = "both"

    @property
    def simplifies_track(self) -> bool:
        return self in (SimplifyTarget.TRACK, SimplifyTarget.BOTH)

    @property
    def simplifies_reference(self) -> bool:
        return self in (SimplifyTarget.REFERENCE, SimplifyTarget.BOTH)


@dataclass(frozen=True)
class Track:
    label: str
    points: Tuple[GeoPoint, ...]
    source: Optional[str] = None


@dataclass(frozen=True)
class DistanceReport:
    label: str
    time_weighted_average_m: float
    location_weighted_average_m: float
    frechet_m: float
    hausdorff_m: float
    point_count: int
    simplified_point_count: int
    source: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TrackComparison:
    report: DistanceReport
    # Subset of the input samples kept by simplification (timestamps retained).
    simplified: Track
    worst_deviation: Optional[Deviation] = None
    diagnostics: Dict[str, Any] = field(default_factory=dict)
