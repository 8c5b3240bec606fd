"""
Formatting utilities for display.

Used by the HTTP status endpoint and the CLI.
"""

from typing import Optional

from .geo import LatLon

RECORDING_LABEL = "⏹"
IDLE_LABEL = "●"


def format_distance(km: float) -> str:
    """
    Format total distance for the status line.

    Args:
        km: Distance in kilometers

    Returns:
        Formatted string (e.g., 'Расстояние: 1.23 км')
    """
    return f"Расстояние: {km:.2f} км"


def format_coords(point: Optional[LatLon]) -> str:
    """
    Format the last known position with 5 decimals (~1 m).

    Args:
        point: Last recorded point or None

    Returns:
        Formatted string (e.g., 'Координаты: 55.75124, 37.61842')
    """
    if point is None:
        return "Координаты: --"
    return f"Координаты: {point.latitude:.5f}, {point.longitude:.5f}"


def format_toggle_label(is_recording: bool) -> str:
    """Label for the record/stop toggle."""
    return RECORDING_LABEL if is_recording else IDLE_LABEL
