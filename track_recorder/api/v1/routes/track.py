"""
Track Routes

Endpoints for controlling recording and exporting the recorded track.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from track_recorder.config import settings
from track_recorder.features.tracking import (
    EmptyExportError,
    PushGeoSource,
    RecordingStateError,
    SinkError,
    SourceError,
    TrackRecorder,
)
from track_recorder.features.tracking.export import GPX_MEDIA_TYPE
from track_recorder.features.tracking.schemas import (
    SampleAccepted,
    SampleIn,
    SaveResponse,
    TrackStatus,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_recorder(request: Request) -> TrackRecorder:
    """Recorder created by the application lifespan."""
    return request.app.state.recorder


def _require_location_permission() -> None:
    if not settings.location_enabled:
        raise HTTPException(
            status_code=403,
            detail="Для работы приложения необходимо разрешение на геолокацию."
        )


def _start_or_toggle(recorder: TrackRecorder, toggle: bool = False) -> None:
    if not (toggle and recorder.store.is_recording):
        _require_location_permission()
    try:
        if toggle:
            recorder.store.toggle()
        else:
            recorder.store.start()
    except RecordingStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SourceError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("", response_model=TrackStatus)
async def get_status(recorder: TrackRecorder = Depends(get_recorder)):
    """Current recording state, distance and last position."""
    return recorder.status()


@router.post("/start", response_model=TrackStatus)
async def start_recording(recorder: TrackRecorder = Depends(get_recorder)):
    """Begin recording. 409 if already recording."""
    _start_or_toggle(recorder)
    return recorder.status()


@router.post("/stop", response_model=TrackStatus)
async def stop_recording(recorder: TrackRecorder = Depends(get_recorder)):
    """Stop recording. No-op when idle."""
    recorder.store.stop()
    return recorder.status()


@router.post("/toggle", response_model=TrackStatus)
async def toggle_recording(recorder: TrackRecorder = Depends(get_recorder)):
    """Record/stop button."""
    _start_or_toggle(recorder, toggle=True)
    return recorder.status()


@router.delete("", response_model=TrackStatus)
async def clear_track(recorder: TrackRecorder = Depends(get_recorder)):
    """Stop recording and erase the track, in memory and in storage."""
    recorder.store.clear()
    await recorder.persistence.flush()
    return recorder.status()


@router.post("/samples", response_model=SampleAccepted)
async def push_sample(
    sample: SampleIn,
    recorder: TrackRecorder = Depends(get_recorder)
):
    """
    Push a position fix into the live source.

    Fixes arriving while nothing is recording are dropped.
    """
    source = recorder.source
    if not isinstance(source, PushGeoSource):
        raise HTTPException(status_code=400, detail="Position source does not accept pushed samples")

    delivered = source.publish(sample.lat, sample.lon) > 0
    return SampleAccepted(delivered=delivered, points_count=recorder.store.point_count)


@router.get("/export")
async def export_track(recorder: TrackRecorder = Depends(get_recorder)):
    """Download the track as a GPX file."""
    try:
        filename, content = recorder.export()
    except EmptyExportError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return Response(
        content=content,
        media_type=GPX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/save", response_model=SaveResponse)
async def save_track(recorder: TrackRecorder = Depends(get_recorder)):
    """Write the GPX export to the configured export directory."""
    try:
        filename, location = recorder.save_to_file()
    except EmptyExportError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SinkError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return SaveResponse(
        success=True,
        filename=filename,
        location=location,
        points_count=recorder.store.point_count,
    )
