"""
Track store and recording state machine.

Owns the recorded Track and the RecordingSession. All mutation happens
on the thread driving the store; observers are told about every change
after it is complete.

Usage:
    store = TrackStore(source)
    store.add_observer(TrackPersistenceObserver(repository))
    store.start()
    ...
    store.stop()
"""

import logging
from typing import Callable, Optional, Union

from track_recorder.shared.geo import distance

from .exceptions import RecordingStateError, SourceError
from .models import GeoPoint, RecordingSession, RecordingState, Track, WatchOptions
from .ports import GeoSampleSource, SampleCallback, TrackObserver

logger = logging.getLogger(__name__)


class TrackStore:
    """
    Recorded track plus the idle/recording state machine.

    States:
        IDLE -> start() -> RECORDING
        RECORDING -> stop() / clear() / fatal SourceError -> IDLE
    """

    def __init__(
        self,
        source: GeoSampleSource,
        options: Optional[WatchOptions] = None,
        distance_fn: Callable[[GeoPoint, GeoPoint], float] = distance,
    ):
        self.source = source
        self.options = options or WatchOptions()
        self._distance_fn = distance_fn
        self._track = Track()
        self._session = RecordingSession()
        self._observers: list[TrackObserver] = []
        # Set once recording has begun; load() is refused afterwards
        self._activated = False

    # =========================================================================
    # Read side
    # =========================================================================

    @property
    def state(self) -> RecordingState:
        return self._session.state

    @property
    def is_recording(self) -> bool:
        return self._session.state is RecordingState.RECORDING

    @property
    def track(self) -> Track:
        """Snapshot of the current track."""
        return self._track.copy()

    @property
    def points(self) -> tuple[GeoPoint, ...]:
        return tuple(self._track.points)

    @property
    def point_count(self) -> int:
        return len(self._track.points)

    @property
    def total_distance_km(self) -> float:
        return self._track.total_distance_km

    @property
    def last_point(self) -> Optional[GeoPoint]:
        return self._track.last_point

    # =========================================================================
    # Observers
    # =========================================================================

    def add_observer(self, observer: TrackObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def remove_observer(self, observer: TrackObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def _notify(self, event: str, *args) -> None:
        for observer in list(self._observers):
            try:
                getattr(observer, event)(*args)
            except Exception:
                logger.exception(f"Observer {type(observer).__name__}.{event} failed")

    # =========================================================================
    # Transitions
    # =========================================================================

    def start(self) -> None:
        """
        Subscribe to the source and begin recording.

        The caller is responsible for the location permission gate.
        The store is already recording while subscribe() runs, so a source
        may deliver its first fix from inside subscribe().

        Raises:
            RecordingStateError: Already recording
            SourceError: Subscription could not be set up (store stays idle)
        """
        if self.is_recording:
            raise RecordingStateError("Recording is already in progress")

        generation = self._session.generation + 1
        self._session = RecordingSession(state=RecordingState.RECORDING, generation=generation)
        try:
            handle = self.source.subscribe(self.options, self._bind_callback(generation))
        except SourceError:
            self._session = RecordingSession(generation=generation)
            logger.error("Failed to start recording: source refused subscription")
            raise
        except Exception as e:
            self._session = RecordingSession(generation=generation)
            logger.error(f"Failed to start recording: {e}")
            raise SourceError(f"Не удалось запустить отслеживание геолокации: {e}") from e

        if self._session.generation != generation:
            # Stopped from inside subscribe() by a fatal source error
            self._release(handle)
            return

        self._session.handle = handle
        self._activated = True
        logger.info("Recording started")
        self._notify("on_recording_started")

    def stop(self) -> None:
        """Unsubscribe and go idle. Safe to call repeatedly."""
        if not self.is_recording:
            return

        handle = self._session.handle
        self._session = RecordingSession(generation=self._session.generation + 1)
        if handle is not None:
            self._release(handle)

        logger.info(
            f"Recording stopped: {self.point_count} points, "
            f"{self.total_distance_km:.3f} km"
        )
        self._notify("on_recording_stopped")

    def toggle(self) -> RecordingState:
        """Stop when recording, start otherwise. Returns the new state."""
        if self.is_recording:
            self.stop()
        else:
            self.start()
        return self.state

    def on_sample(self, point: GeoPoint) -> None:
        """
        Record one position sample.

        Raises:
            RecordingStateError: Not recording
        """
        if not self.is_recording:
            raise RecordingStateError("Samples are only accepted while recording")
        self._append(point)

    def clear(self) -> None:
        """Stop recording if needed and reset the track to empty."""
        self.stop()
        self._track = Track()
        # Any callback still queued against an older subscription is now stale
        self._session.generation += 1
        logger.info("Track cleared")
        self._notify("on_track_cleared")

    def load(self, track: Track) -> None:
        """
        Replace the track with a restored one.

        Only valid at startup. The stored distance is trusted as-is;
        it is not checked against the points.

        Raises:
            RecordingStateError: Recording already happened in this process
        """
        if self._activated:
            raise RecordingStateError("Track can only be loaded before recording starts")
        self._track = track.copy()
        logger.info(
            f"Track loaded: {self.point_count} points, "
            f"{self.total_distance_km:.3f} km"
        )

    # =========================================================================
    # Internals
    # =========================================================================

    def _bind_callback(self, generation: int) -> SampleCallback:
        def deliver(result: Union[GeoPoint, SourceError]) -> None:
            self._deliver(generation, result)
        return deliver

    def _deliver(self, generation: int, result: Union[GeoPoint, SourceError]) -> None:
        if generation != self._session.generation or not self.is_recording:
            logger.debug(f"Dropping stale delivery from subscription #{generation}")
            return

        if isinstance(result, SourceError):
            if result.recoverable:
                logger.warning(f"Position source error (skipped): {result}")
                return
            logger.error(f"Position source failed, stopping recording: {result}")
            self.stop()
            self._notify("on_source_failed", result)
            return

        self._append(result)

    def _append(self, point: GeoPoint) -> None:
        self._activated = True
        step_km = self._track.append(point, self._distance_fn)
        logger.debug(
            f"Point #{self.point_count} ({point.latitude}, {point.longitude}), "
            f"+{step_km:.4f} km"
        )
        self._notify("on_track_updated", self._track, point)

    def _release(self, handle) -> None:
        try:
            self.source.unsubscribe(handle)
        except Exception as e:
            logger.error(f"Failed to unsubscribe from position source: {e}")
