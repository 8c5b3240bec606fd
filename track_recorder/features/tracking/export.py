"""
GPX export.

Serializes a recorded track as GPX 1.1 and hands it to a file sink.

Note: the track keeps no capture times, so every <time> in the document
is the wall-clock time at export. All trackpoints of one export carry
(nearly) the same timestamp.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

import gpxpy.gpx

from .exceptions import EmptyExportError, SinkError
from .models import Track
from .ports import FileSink

logger = logging.getLogger(__name__)

DEFAULT_CREATOR = "MyGPSApp"
DEFAULT_TRACK_NAME = "GPS Track"
GPX_MEDIA_TYPE = "application/gpx+xml"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def export_gpx(
    track: Track,
    creator: str = DEFAULT_CREATOR,
    name: str = DEFAULT_TRACK_NAME,
    clock: Clock = utc_now,
) -> str:
    """
    Build a GPX 1.1 document with one track and one segment.

    Args:
        track: Track to export
        creator: Value of the gpx/@creator attribute
        name: Track name
        clock: Source of the per-point timestamps

    Returns:
        GPX XML text

    Raises:
        EmptyExportError: Track has no points
    """
    if track.is_empty:
        raise EmptyExportError()

    gpx = gpxpy.gpx.GPX()
    gpx.creator = creator

    gpx_track = gpxpy.gpx.GPXTrack(name=name)
    gpx.tracks.append(gpx_track)

    segment = gpxpy.gpx.GPXTrackSegment()
    gpx_track.segments.append(segment)

    for point in track.points:
        segment.points.append(
            gpxpy.gpx.GPXTrackPoint(point.latitude, point.longitude, time=clock())
        )

    return gpx.to_xml(version="1.1")


def export_filename(now: Optional[datetime] = None) -> str:
    """
    File name for an export, e.g. 'track_2026-10-19T08-15-02.123Z.gpx'.

    Colons are replaced so the name is valid on every filesystem.
    """
    now = (now or utc_now()).astimezone(timezone.utc)
    stamp = now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return f"track_{stamp.replace(':', '-')}.gpx"


class DirectoryFileSink:
    """Writes documents into a directory, creating it on first use."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def write(self, filename: str, content: str) -> str:
        path = self.directory / Path(filename).name
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise SinkError(f"Не удалось сохранить файл {path}: {e}") from e
        return str(path)


class TrackExporter:
    """
    Export a track and write it through a sink.

    Usage:
        exporter = TrackExporter(DirectoryFileSink(settings.export_dir))
        location = exporter.save(store.track)
    """

    def __init__(
        self,
        sink: FileSink,
        creator: str = DEFAULT_CREATOR,
        track_name: str = DEFAULT_TRACK_NAME,
        clock: Clock = utc_now,
    ):
        self.sink = sink
        self.creator = creator
        self.track_name = track_name
        self.clock = clock

    def render(self, track: Track) -> tuple[str, str]:
        """
        Build the document and its file name.

        Returns:
            (filename, gpx_text)
        """
        content = export_gpx(track, creator=self.creator, name=self.track_name, clock=self.clock)
        return export_filename(self.clock()), content

    def save(self, track: Track) -> tuple[str, str]:
        """
        Write the exported track through the sink.

        Returns:
            (filename, location reported by the sink)

        Raises:
            EmptyExportError: Track has no points
            SinkError: Sink could not write the document
        """
        filename, content = self.render(track)
        try:
            location = self.sink.write(filename, content)
        except SinkError:
            logger.error(f"Failed to save {filename}")
            raise
        except OSError as e:
            logger.error(f"Failed to save {filename}: {e}")
            raise SinkError(f"Не удалось сохранить файл: {e}") from e

        logger.info(f"Track saved to {location} ({len(track.points)} points)")
        return filename, location
