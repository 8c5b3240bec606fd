"""
Track Recorder API

FastAPI application driving the GPS track recorder.
"""

from contextlib import asynccontextmanager
import logging
import sys
from typing import Optional

from fastapi import FastAPI

from track_recorder import __version__
from track_recorder.config import settings
from track_recorder.api.v1.router import api_router
from track_recorder.features.tracking import PushGeoSource, TrackRecorder


# === Logging Setup ===
def setup_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )


setup_logging()
logger = logging.getLogger(__name__)


def create_app(recorder: Optional[TrackRecorder] = None) -> FastAPI:
    """
    Build the application.

    Args:
        recorder: Pre-built recorder (tests). By default one is built from
            settings with a push source and the stored track restored.
    """

    # === Lifespan ===
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events."""
        # Startup
        logger.info("Starting Track Recorder API...")
        if recorder is None:
            app.state.recorder = TrackRecorder.from_settings(PushGeoSource(), settings)
            app.state.recorder.restore()
        else:
            app.state.recorder = recorder

        yield

        # Shutdown
        app.state.recorder.store.stop()
        await app.state.recorder.persistence.flush()
        await app.state.recorder.notifications.drain()
        logger.info("Shutting down...")

    app = FastAPI(
        title="Track Recorder API",
        description="Record GPS tracks, keep them across restarts, export GPX",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # === Routes ===
    app.include_router(api_router, prefix="/api/v1")

    # === Health Check ===
    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app


app = create_app()
