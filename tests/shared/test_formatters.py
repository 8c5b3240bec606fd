"""
Tests for display formatters.
"""

from track_recorder.features.tracking.models import GeoPoint
from track_recorder.shared.formatters import (
    IDLE_LABEL,
    RECORDING_LABEL,
    format_coords,
    format_distance,
    format_toggle_label,
)


class TestFormatDistance:
    """Tests for format_distance."""

    def test_zero(self):
        assert format_distance(0) == "Расстояние: 0.00 км"

    def test_two_decimals(self):
        """Distance is rounded to 10 m."""
        assert format_distance(1.23456) == "Расстояние: 1.23 км"
        assert format_distance(12.5) == "Расстояние: 12.50 км"


class TestFormatCoords:
    """Tests for format_coords."""

    def test_no_point(self):
        """Empty track shows a placeholder."""
        assert format_coords(None) == "Координаты: --"

    def test_five_decimals(self):
        point = GeoPoint(55.751244, 37.618423)
        assert format_coords(point) == "Координаты: 55.75124, 37.61842"

    def test_negative(self):
        point = GeoPoint(-33.8688, -70.0)
        assert format_coords(point) == "Координаты: -33.86880, -70.00000"


class TestToggleLabel:
    """Tests for format_toggle_label."""

    def test_labels(self):
        assert format_toggle_label(True) == RECORDING_LABEL
        assert format_toggle_label(False) == IDLE_LABEL
        assert RECORDING_LABEL != IDLE_LABEL
