"""
API Router v1

Combines all route modules.
"""

from fastapi import APIRouter

from track_recorder.api.v1.routes import track

api_router = APIRouter()

api_router.include_router(track.router, prefix="/track", tags=["Track"])
