"""
Feature modules for Track Recorder.

Each feature is a self-contained module with:
- models.py - Domain dataclasses
- schemas.py - Pydantic schemas
- service.py - Wiring of the feature's collaborators
- persistence.py - Data access (optional)
"""
