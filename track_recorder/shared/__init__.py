"""
Shared utilities (NOT business logic).

Usage:
    from track_recorder.shared import haversine, distance
    from track_recorder.shared.formatters import format_distance
"""
from .geo import (
    haversine,
    distance,
    calculate_total_distance,
    EARTH_RADIUS_KM,
)
from .formatters import (
    format_distance,
    format_coords,
    format_toggle_label,
)
from .storage import KeyValueSlot, MemorySlot, JsonFileSlot
from .telegram import TelegramNotifier, get_telegram_notifier

__all__ = [
    # geo
    "haversine",
    "distance",
    "calculate_total_distance",
    "EARTH_RADIUS_KM",
    # formatters
    "format_distance",
    "format_coords",
    "format_toggle_label",
    # storage
    "KeyValueSlot",
    "MemorySlot",
    "JsonFileSlot",
    # telegram
    "TelegramNotifier",
    "get_telegram_notifier",
]
