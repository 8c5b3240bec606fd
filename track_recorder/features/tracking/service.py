"""
Track recorder service.

Wires the store to its persistence, export and notification
collaborators. The HTTP app and the CLI both drive one of these.
"""

import logging
from typing import Optional

from track_recorder.config import Settings
from track_recorder.shared.formatters import (
    format_coords,
    format_distance,
    format_toggle_label,
)
from track_recorder.shared.storage import JsonFileSlot
from track_recorder.shared.telegram import TelegramNotifier

from .export import DirectoryFileSink, TrackExporter
from .models import WatchOptions
from .notifications import RecordingNotifier
from .persistence import TrackPersistenceObserver, TrackRepository, restore_track
from .ports import GeoSampleSource
from .schemas import TrackPointOut, TrackStatus
from .store import TrackStore

logger = logging.getLogger(__name__)


class TrackRecorder:
    """
    One recording instance: store + repository + exporter + observers.

    Usage:
        recorder = TrackRecorder.from_settings(PushGeoSource(), settings)
        recorder.restore()
        recorder.store.start()
    """

    def __init__(
        self,
        source: GeoSampleSource,
        repository: TrackRepository,
        exporter: TrackExporter,
        options: Optional[WatchOptions] = None,
        notifier: Optional[TelegramNotifier] = None,
    ):
        self.source = source
        self.repository = repository
        self.exporter = exporter
        self.store = TrackStore(source, options)
        self.persistence = TrackPersistenceObserver(repository)
        self.notifications = RecordingNotifier(notifier)

        self.store.add_observer(self.persistence)
        self.store.add_observer(self.notifications)

    @classmethod
    def from_settings(
        cls,
        source: GeoSampleSource,
        settings: Settings,
        notifier: Optional[TelegramNotifier] = None,
    ) -> "TrackRecorder":
        repository = TrackRepository(
            JsonFileSlot(settings.storage_dir),
            key=settings.track_storage_key,
        )
        exporter = TrackExporter(
            DirectoryFileSink(settings.export_dir),
            creator=settings.gpx_creator,
            track_name=settings.gpx_track_name,
        )
        return cls(
            source,
            repository,
            exporter,
            options=WatchOptions.from_settings(settings),
            notifier=notifier,
        )

    def restore(self) -> bool:
        """Load the persisted track, if any. Call once at startup."""
        return restore_track(self.store, self.repository)

    def export(self) -> tuple[str, str]:
        """Render the current track as (filename, gpx_text)."""
        return self.exporter.render(self.store.track)

    def save_to_file(self) -> tuple[str, str]:
        """Write the current track through the file sink."""
        return self.exporter.save(self.store.track)

    def status(self) -> TrackStatus:
        store = self.store
        last = store.last_point
        return TrackStatus(
            state=store.state.value,
            is_recording=store.is_recording,
            points_count=store.point_count,
            distance_km=store.total_distance_km,
            last_point=TrackPointOut(lat=last.latitude, lon=last.longitude) if last else None,
            toggle_label=format_toggle_label(store.is_recording),
            distance_text=format_distance(store.total_distance_km),
            coords_text=format_coords(last),
        )
