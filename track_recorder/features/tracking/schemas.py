"""
Track-related schemas.

Pydantic models for the persisted record and the HTTP API.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class PersistedTrackRecord(BaseModel):
    """Durable form of a track: {"points": [[lat, lon], ...], "distance": km}."""

    points: list[tuple[float, float]] = Field(default_factory=list)
    distance: float = 0.0

    @field_validator('points', mode='before')
    @classmethod
    def default_points(cls, v):
        """Treat null like a missing field."""
        return [] if v is None else v

    @field_validator('distance', mode='before')
    @classmethod
    def default_distance(cls, v):
        """Treat null like a missing field."""
        return 0.0 if v is None else v


class SampleIn(BaseModel):
    """Position sample pushed by a client."""

    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)


class SampleAccepted(BaseModel):
    """Whether a pushed sample reached an active recording."""

    delivered: bool
    points_count: int


class TrackPointOut(BaseModel):
    """Single point of the recorded track."""

    lat: float
    lon: float


class TrackStatus(BaseModel):
    """Current recording state and track summary."""

    state: str
    is_recording: bool
    points_count: int
    distance_km: float
    last_point: Optional[TrackPointOut] = None

    # Ready-to-display strings
    toggle_label: str
    distance_text: str
    coords_text: str


class SaveResponse(BaseModel):
    """Result of writing the exported GPX through the file sink."""

    success: bool
    filename: str
    location: str
    points_count: int
