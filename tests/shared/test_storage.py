"""
Tests for key-value slots.
"""

import pytest

from track_recorder.shared.storage import JsonFileSlot, MemorySlot


# =============================================================================
# Test MemorySlot
# =============================================================================

class TestMemorySlot:
    """Tests for the in-process slot."""

    def test_absent_key(self):
        assert MemorySlot().get("gpsTrack") is None

    def test_set_get_remove(self):
        slot = MemorySlot()
        slot.set("gpsTrack", "{}")
        assert slot.get("gpsTrack") == "{}"
        assert "gpsTrack" in slot

        slot.remove("gpsTrack")
        assert slot.get("gpsTrack") is None

    def test_remove_missing_key(self):
        """Removing an absent key is not an error."""
        MemorySlot().remove("gpsTrack")

    def test_initial_data_is_copied(self):
        initial = {"a": "1"}
        slot = MemorySlot(initial)
        slot.set("a", "2")
        assert initial["a"] == "1"


# =============================================================================
# Test JsonFileSlot
# =============================================================================

class TestJsonFileSlot:
    """Tests for the file-backed slot."""

    def test_absent_key(self, tmp_path):
        assert JsonFileSlot(tmp_path).get("gpsTrack") is None

    def test_creates_directory(self, tmp_path):
        directory = tmp_path / "nested" / "storage"
        slot = JsonFileSlot(directory)
        slot.set("gpsTrack", '{"points": []}')

        assert (directory / "gpsTrack.json").read_text(encoding="utf-8") == '{"points": []}'

    def test_survives_new_instance(self, tmp_path):
        """A value written by one instance is read by the next (restart)."""
        JsonFileSlot(tmp_path).set("gpsTrack", "value")
        assert JsonFileSlot(tmp_path).get("gpsTrack") == "value"

    def test_overwrite_leaves_no_temp_file(self, tmp_path):
        slot = JsonFileSlot(tmp_path)
        slot.set("gpsTrack", "one")
        slot.set("gpsTrack", "two")

        assert slot.get("gpsTrack") == "two"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["gpsTrack.json"]

    def test_remove(self, tmp_path):
        slot = JsonFileSlot(tmp_path)
        slot.set("gpsTrack", "value")
        slot.remove("gpsTrack")
        slot.remove("gpsTrack")

        assert slot.get("gpsTrack") is None

    @pytest.mark.parametrize("key", ["../escape", "a/b", "", "with space"])
    def test_rejects_unsafe_keys(self, tmp_path, key):
        with pytest.raises(ValueError):
            JsonFileSlot(tmp_path).get(key)
