"""
Track recording errors.

Source and sink errors need human action and are surfaced to the caller.
Decode errors are recovered locally by the repository.
"""


class TrackRecorderError(Exception):
    """Base class for all track recorder errors."""


class SourceError(TrackRecorderError):
    """
    Position stream failed or location permission was denied.

    Recoverable errors (a single missed fix, a timeout) are skipped;
    anything else ends the recording session.
    """

    def __init__(self, message: str, recoverable: bool = False):
        super().__init__(message)
        self.recoverable = recoverable


class DecodeError(TrackRecorderError):
    """Persisted track record could not be decoded."""


class CorruptRecordError(DecodeError):
    """Persisted record is not well-formed; discard it."""


class EmptyExportError(TrackRecorderError):
    """Export requested for a track with no points."""

    def __init__(self, message: str = "Трек пуст. Нечего сохранять."):
        super().__init__(message)


class SinkError(TrackRecorderError):
    """Writing the exported document failed."""


class RecordingStateError(TrackRecorderError):
    """Operation is not valid in the current recording state."""
