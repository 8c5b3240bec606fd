"""GPS track recorder: record, persist and export position tracks."""

__version__ = "0.1.0"
