"""
Durable key-value slots.

A slot stores string values under string keys, like browser localStorage.

Usage:
    slot = JsonFileSlot(settings.storage_dir)
    slot.set("gpsTrack", payload)
    raw = slot.get("gpsTrack")  # None if absent
"""

import logging
import re
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueSlot(Protocol):
    """String key-value storage contract."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemorySlot:
    """In-process slot. Contents are lost on exit."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class JsonFileSlot:
    """
    Slot backed by one file per key in a directory.

    Writes go to a temporary file first and are moved into place,
    so a crash mid-write never leaves a truncated value behind.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(path)
        logger.debug(f"Stored {len(value)} chars under {key!r}")

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
