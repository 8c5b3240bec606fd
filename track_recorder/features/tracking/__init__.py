"""
Track recording module.

Usage:
    from track_recorder.features.tracking import TrackRecorder, PushGeoSource
    from track_recorder.features.tracking import export_gpx, decode

Components:
- TrackStore: Recorded track + idle/recording state machine
- TrackRepository: Persisted track under one key of a key-value slot
- TrackExporter: GPX export written through a file sink
- PushGeoSource / GPXReplaySource: Position sample sources
- TrackRecorder: Wires all of the above together
"""

from .exceptions import (
    TrackRecorderError,
    SourceError,
    DecodeError,
    CorruptRecordError,
    EmptyExportError,
    SinkError,
    RecordingStateError,
)
from .models import GeoPoint, Track, RecordingState, RecordingSession, WatchOptions
from .ports import GeoSampleSource, FileSink, TrackObserver
from .store import TrackStore
from .persistence import (
    TRACK_STORAGE_KEY,
    encode,
    decode,
    dumps,
    TrackRepository,
    TrackPersistenceObserver,
    restore_track,
)
from .export import export_gpx, export_filename, DirectoryFileSink, TrackExporter
from .sources import PushGeoSource, GPXReplaySource
from .notifications import RecordingNotifier
from .service import TrackRecorder

__all__ = [
    # Errors
    "TrackRecorderError",
    "SourceError",
    "DecodeError",
    "CorruptRecordError",
    "EmptyExportError",
    "SinkError",
    "RecordingStateError",
    # Models
    "GeoPoint",
    "Track",
    "RecordingState",
    "RecordingSession",
    "WatchOptions",
    # Ports
    "GeoSampleSource",
    "FileSink",
    "TrackObserver",
    # Store
    "TrackStore",
    # Persistence
    "TRACK_STORAGE_KEY",
    "encode",
    "decode",
    "dumps",
    "TrackRepository",
    "TrackPersistenceObserver",
    "restore_track",
    # Export
    "export_gpx",
    "export_filename",
    "DirectoryFileSink",
    "TrackExporter",
    # Sources
    "PushGeoSource",
    "GPXReplaySource",
    # Notifications
    "RecordingNotifier",
    # Service
    "TrackRecorder",
]
