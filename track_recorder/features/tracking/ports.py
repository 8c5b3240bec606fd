"""
Contracts of the collaborators the track store talks to.
"""

from typing import Any, Callable, Protocol, Union

from .exceptions import SourceError
from .models import GeoPoint, Track, WatchOptions

SampleCallback = Callable[[Union[GeoPoint, SourceError]], None]


class GeoSampleSource(Protocol):
    """Position stream. Delivers a GeoPoint or a SourceError per callback."""

    def subscribe(self, options: WatchOptions, callback: SampleCallback) -> Any: ...

    def unsubscribe(self, handle: Any) -> None: ...


class FileSink(Protocol):
    """Writes a document to user-visible storage and returns its location."""

    def write(self, filename: str, content: str) -> str: ...


class TrackObserver:
    """
    Receives track store events.

    Subclasses override only what they need. Calls happen synchronously
    on the thread driving the store, after the state change is complete.
    """

    def on_recording_started(self) -> None:
        pass

    def on_recording_stopped(self) -> None:
        pass

    def on_track_updated(self, track: Track, point: GeoPoint) -> None:
        pass

    def on_track_cleared(self) -> None:
        pass

    def on_source_failed(self, error: SourceError) -> None:
        pass
