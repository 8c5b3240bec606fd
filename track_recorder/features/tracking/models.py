"""
Track recording domain models.

GeoPoint and Track are plain dataclasses; the persisted form lives
in schemas.py.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from track_recorder.config import Settings
from track_recorder.shared.geo import calculate_total_distance


class RecordingState(str, Enum):
    """Recording session mode."""
    IDLE = "idle"
    RECORDING = "recording"


@dataclass(frozen=True)
class GeoPoint:
    """A recorded position. Immutable once recorded."""
    latitude: float
    longitude: float

    def __post_init__(self):
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude out of range: {self.longitude}")

    def as_pair(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass
class Track:
    """
    Ordered recorded path plus accumulated distance.

    total_distance_km is kept equal to the sum of consecutive
    great-circle distances by append(); it is only recomputed
    from scratch by recalculated().
    """
    points: list[GeoPoint] = field(default_factory=list)
    total_distance_km: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.points

    @property
    def last_point(self) -> Optional[GeoPoint]:
        return self.points[-1] if self.points else None

    def append(
        self,
        point: GeoPoint,
        distance_fn: Callable[[GeoPoint, GeoPoint], float]
    ) -> float:
        """
        Append a point and fold its step distance into the total.

        The step is computed before anything is mutated, so a failing
        distance function leaves the track untouched.

        Returns:
            Step distance in kilometers (0 for the first point)
        """
        step_km = 0.0
        if self.points:
            step_km = distance_fn(self.points[-1], point)

        self.points.append(point)
        self.total_distance_km += step_km
        return step_km

    def copy(self) -> "Track":
        return Track(points=list(self.points), total_distance_km=self.total_distance_km)

    def recalculated(self) -> "Track":
        """Copy with the distance recomputed from the points (repair)."""
        return Track(
            points=list(self.points),
            total_distance_km=calculate_total_distance(self.points),
        )


@dataclass(frozen=True)
class WatchOptions:
    """Options passed to the position source on subscribe."""
    enable_high_accuracy: bool = True
    timeout_ms: int = 10000
    maximum_age_ms: int = 0

    @classmethod
    def from_settings(cls, settings: Settings) -> "WatchOptions":
        return cls(
            enable_high_accuracy=settings.watch_high_accuracy,
            timeout_ms=settings.watch_timeout_ms,
            maximum_age_ms=settings.watch_maximum_age_ms,
        )


@dataclass
class RecordingSession:
    """
    Process-wide recording mode plus the active subscription handle.

    handle is set while RECORDING, once subscribe() has returned.
    generation changes whenever the session is superseded (stop/clear),
    so callbacks bound to an older generation can be recognised as stale.
    """
    state: RecordingState = RecordingState.IDLE
    handle: Any = None
    generation: int = 0
