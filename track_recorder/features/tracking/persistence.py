"""
Track persistence.

Codec between Track and PersistedTrackRecord, a repository over a
durable key-value slot, and the write-through store observer.
"""

import asyncio
import logging
from typing import Optional

from track_recorder.shared.storage import KeyValueSlot

from .exceptions import CorruptRecordError
from .models import GeoPoint, Track
from .ports import TrackObserver
from .schemas import PersistedTrackRecord
from .store import TrackStore

logger = logging.getLogger(__name__)

TRACK_STORAGE_KEY = "gpsTrack"


# =============================================================================
# Codec
# =============================================================================

def encode(track: Track) -> PersistedTrackRecord:
    """Project a track onto its persisted form."""
    return PersistedTrackRecord(
        points=[point.as_pair() for point in track.points],
        distance=track.total_distance_km,
    )


def dumps(track: Track) -> str:
    """Encode a track as the stored JSON string."""
    return encode(track).model_dump_json()


def decode(raw: str | bytes) -> Track:
    """
    Decode a stored record.

    Missing or null fields fall back to an empty track / zero distance.
    The stored distance is taken as-is.

    Raises:
        CorruptRecordError: Input is not a JSON object of the record shape
    """
    try:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        record = PersistedTrackRecord.model_validate_json(raw)
        points = [GeoPoint(lat, lon) for lat, lon in record.points]
    except ValueError as e:
        # ValidationError and UnicodeDecodeError are ValueErrors too
        raise CorruptRecordError(f"Stored track is unreadable: {e}") from e

    return Track(points=points, total_distance_km=record.distance)


# =============================================================================
# Repository
# =============================================================================

class TrackRepository:
    """
    Stores the track under one fixed key.

    Usage:
        repo = TrackRepository(JsonFileSlot(settings.storage_dir))
        track = repo.get()  # None if nothing (usable) is stored
    """

    def __init__(self, slot: KeyValueSlot, key: str = TRACK_STORAGE_KEY):
        self.slot = slot
        self.key = key

    def get(self) -> Optional[Track]:
        """
        Read the stored track.

        A corrupt record is removed and reported as absent.
        """
        try:
            raw = self.slot.get(self.key)
            if raw is None:
                return None
            return decode(raw)
        except (CorruptRecordError, UnicodeDecodeError) as e:
            logger.error(f"Discarding stored track: {e}")
            self.slot.remove(self.key)
            return None

    def save(self, track: Track) -> None:
        self.slot.set(self.key, dumps(track))

    def delete(self) -> None:
        self.slot.remove(self.key)


# =============================================================================
# Write-through observer
# =============================================================================

# Pending-operation marker for an erase
_ERASE = object()


class TrackPersistenceObserver(TrackObserver):
    """
    Writes the track after every added point and erases it on clear.

    Best effort: failures are logged and never retried. The in-memory
    track stays the source of truth while the process runs.

    Inside an event loop the disk work runs in a worker thread, one
    operation at a time. Updates arriving while a write is in flight are
    coalesced: only the latest state is written next. Without a running
    loop (CLI, plain scripts) every operation runs inline.
    """

    def __init__(self, repository: TrackRepository):
        self.repository = repository
        # Latest not-yet-written state: a live Track, _ERASE or None
        self._pending: object = None
        self._writer: Optional[asyncio.Task] = None

    def on_track_updated(self, track: Track, point: GeoPoint) -> None:
        self._pending = track
        self._schedule()

    def on_track_cleared(self) -> None:
        self._pending = _ERASE
        self._schedule()

    async def flush(self) -> None:
        """Wait until every scheduled write has reached the repository."""
        writer = self._writer
        if writer is not None and not writer.done():
            await writer

    def _schedule(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._run_inline()
            return

        writer = self._writer
        if writer is None or writer.done() or writer.get_loop() is not loop:
            self._writer = loop.create_task(self._write_pending())

    def _run_inline(self) -> None:
        pending, self._pending = self._pending, None
        if pending is _ERASE:
            self._erase()
        elif pending is not None:
            self._save(pending)

    async def _write_pending(self) -> None:
        while self._pending is not None:
            pending, self._pending = self._pending, None
            if pending is _ERASE:
                await asyncio.to_thread(self._erase)
            else:
                # Snapshot on the loop thread; the store keeps appending
                await asyncio.to_thread(self._save, pending.copy())

    def _save(self, track: Track) -> None:
        try:
            self.repository.save(track)
        except Exception as e:
            logger.error(f"Failed to persist track ({len(track.points)} points): {e}")

    def _erase(self) -> None:
        try:
            self.repository.delete()
        except Exception as e:
            logger.error(f"Failed to erase persisted track: {e}")


def restore_track(store: TrackStore, repository: TrackRepository) -> bool:
    """
    Load the stored track into a fresh store.

    Returns:
        True if a track was restored
    """
    track = repository.get()
    if track is None:
        logger.info("No stored track to restore")
        return False
    store.load(track)
    return True
