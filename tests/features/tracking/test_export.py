"""
Tests for GPX export.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import gpxpy
import pytest

from track_recorder.features.tracking import (
    DirectoryFileSink,
    EmptyExportError,
    GeoPoint,
    SinkError,
    Track,
    TrackExporter,
    export_filename,
    export_gpx,
)


# =============================================================================
# Fixtures
# =============================================================================

FIXED_NOW = datetime(2026, 10, 19, 8, 15, 2, 123000, tzinfo=timezone.utc)


def fixed_clock():
    return FIXED_NOW


@pytest.fixture
def two_point_track():
    return Track(points=[GeoPoint(55.0, 37.0), GeoPoint(55.1, 37.1)], total_distance_km=13.0)


# =============================================================================
# Test export_gpx
# =============================================================================

class TestExportGpx:
    """Tests for the GPX document."""

    def test_empty_track_is_rejected(self):
        with pytest.raises(EmptyExportError):
            export_gpx(Track())

    def test_two_points(self, two_point_track):
        xml = export_gpx(two_point_track, clock=fixed_clock)

        assert xml.count("<trkpt") == 2
        parsed = gpxpy.parse(xml)
        points = parsed.tracks[0].segments[0].points
        assert [(p.latitude, p.longitude) for p in points] == [(55.0, 37.0), (55.1, 37.1)]

    def test_document_structure(self, two_point_track):
        xml = export_gpx(two_point_track, creator="TestApp", clock=fixed_clock)

        assert 'version="1.1"' in xml
        assert 'creator="TestApp"' in xml
        assert xml.count("<trk>") == 1
        assert xml.count("<trkseg>") == 1

        parsed = gpxpy.parse(xml)
        assert len(parsed.tracks) == 1
        assert parsed.tracks[0].name == "GPS Track"
        assert len(parsed.tracks[0].segments) == 1

    def test_order_preserved(self):
        points = [GeoPoint(float(i), float(-i)) for i in range(10)]
        xml = export_gpx(Track(points=points), clock=fixed_clock)

        parsed = gpxpy.parse(xml).tracks[0].segments[0].points
        assert [(p.latitude, p.longitude) for p in parsed] == [p.as_pair() for p in points]

    def test_timestamps_are_export_time(self, two_point_track):
        """Every point carries the export clock, not a capture time."""
        xml = export_gpx(two_point_track, clock=fixed_clock)

        parsed = gpxpy.parse(xml).tracks[0].segments[0].points
        assert all(
            p.time.replace(microsecond=0) == FIXED_NOW.replace(microsecond=0)
            for p in parsed
        )
        assert xml.count("<time>") == 2

    def test_timestamps_with_wall_clock_are_close(self, two_point_track):
        before = datetime.now(timezone.utc)
        xml = export_gpx(two_point_track)
        after = datetime.now(timezone.utc)

        parsed = gpxpy.parse(xml).tracks[0].segments[0].points
        for point in parsed:
            assert before - timedelta(seconds=1) <= point.time <= after + timedelta(seconds=1)

    def test_single_point(self):
        xml = export_gpx(Track(points=[GeoPoint(0.0, 0.0)]), clock=fixed_clock)
        assert xml.count("<trkpt") == 1


# =============================================================================
# Test export_filename
# =============================================================================

class TestExportFilename:
    """Tests for export_filename."""

    def test_format(self):
        assert export_filename(FIXED_NOW) == "track_2026-10-19T08-15-02.123Z.gpx"

    def test_no_colons(self):
        assert ":" not in export_filename()

    def test_converts_to_utc(self):
        moscow = timezone(timedelta(hours=3))
        local = datetime(2026, 10, 19, 11, 15, 2, 123000, tzinfo=moscow)
        assert export_filename(local) == "track_2026-10-19T08-15-02.123Z.gpx"


# =============================================================================
# Test Sinks and Exporter
# =============================================================================

class TestDirectoryFileSink:
    """Tests for DirectoryFileSink."""

    def test_writes_file(self, tmp_path):
        sink = DirectoryFileSink(tmp_path / "exports")
        location = sink.write("track.gpx", "<gpx/>")

        assert location == str(tmp_path / "exports" / "track.gpx")
        assert (tmp_path / "exports" / "track.gpx").read_text(encoding="utf-8") == "<gpx/>"

    def test_strips_directories_from_name(self, tmp_path):
        sink = DirectoryFileSink(tmp_path)
        location = sink.write("../outside.gpx", "<gpx/>")
        assert location == str(tmp_path / "outside.gpx")

    def test_os_error_becomes_sink_error(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("file", encoding="utf-8")

        with pytest.raises(SinkError):
            DirectoryFileSink(blocker).write("track.gpx", "<gpx/>")


class TestTrackExporter:
    """Tests for TrackExporter."""

    def test_render(self, two_point_track):
        exporter = TrackExporter(MagicMock(), clock=fixed_clock)
        filename, content = exporter.render(two_point_track)

        assert filename == "track_2026-10-19T08-15-02.123Z.gpx"
        assert content.count("<trkpt") == 2

    def test_save(self, tmp_path, two_point_track):
        exporter = TrackExporter(DirectoryFileSink(tmp_path), creator="X", clock=fixed_clock)
        filename, location = exporter.save(two_point_track)

        saved = (tmp_path / filename).read_text(encoding="utf-8")
        assert location == str(tmp_path / filename)
        assert 'creator="X"' in saved

    def test_save_empty_track(self):
        sink = MagicMock()
        with pytest.raises(EmptyExportError):
            TrackExporter(sink).save(Track())
        sink.write.assert_not_called()

    def test_sink_error_propagates(self, two_point_track):
        sink = MagicMock()
        sink.write.side_effect = SinkError("no space left")
        with pytest.raises(SinkError, match="no space left"):
            TrackExporter(sink, clock=fixed_clock).save(two_point_track)

    def test_sink_os_error_is_wrapped(self, two_point_track):
        sink = MagicMock()
        sink.write.side_effect = PermissionError("denied")
        with pytest.raises(SinkError):
            TrackExporter(sink, clock=fixed_clock).save(two_point_track)

    def test_save_leaves_track_untouched(self, two_point_track):
        sink = MagicMock()
        sink.write.side_effect = SinkError("boom")
        before = two_point_track.copy()

        with pytest.raises(SinkError):
            TrackExporter(sink, clock=fixed_clock).save(two_point_track)

        assert two_point_track == before
