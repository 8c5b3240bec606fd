"""
Position sample sources.

- PushGeoSource: samples pushed in by the host (HTTP endpoint, tests)
- GPXReplaySource: replays the points of a GPX file on an asyncio loop
"""

import asyncio
import logging
import uuid
from pathlib import Path
from typing import List

import gpxpy
import gpxpy.gpx

from .exceptions import SourceError
from .models import GeoPoint, WatchOptions
from .ports import SampleCallback

logger = logging.getLogger(__name__)


class PushGeoSource:
    """
    Fan-out of externally supplied samples to the active subscribers.

    Samples published while nobody is subscribed are dropped.
    """

    def __init__(self):
        self._subscribers: dict[str, SampleCallback] = {}

    @property
    def has_subscribers(self) -> bool:
        return bool(self._subscribers)

    def subscribe(self, options: WatchOptions, callback: SampleCallback) -> str:
        handle = uuid.uuid4().hex
        self._subscribers[handle] = callback
        logger.debug(f"Push source subscription {handle} ({options})")
        return handle

    def unsubscribe(self, handle: str) -> None:
        self._subscribers.pop(handle, None)

    def publish(self, latitude: float, longitude: float) -> int:
        """
        Deliver a position to every subscriber.

        Returns:
            Number of subscribers that received the sample

        Raises:
            ValueError: Coordinates out of range
        """
        point = GeoPoint(latitude, longitude)
        callbacks = list(self._subscribers.values())
        for callback in callbacks:
            callback(point)
        return len(callbacks)

    def publish_error(self, error: SourceError) -> int:
        """Deliver a source failure to every subscriber."""
        callbacks = list(self._subscribers.values())
        for callback in callbacks:
            callback(error)
        return len(callbacks)


def extract_points(content: bytes) -> List[GeoPoint]:
    """
    Extract points from GPX content.

    Track points are used; route points only if there are no tracks.

    Raises:
        ValueError: Content is not valid GPX
    """
    try:
        gpx = gpxpy.parse(content.decode('utf-8'))
    except (UnicodeDecodeError, gpxpy.gpx.GPXException) as e:
        raise ValueError(f"Invalid GPX file: {e}") from e

    points: List[GeoPoint] = []

    for track in gpx.tracks:
        for segment in track.segments:
            for point in segment.points:
                points.append(GeoPoint(point.latitude, point.longitude))

    if not points:
        for route in gpx.routes:
            for point in route.points:
                points.append(GeoPoint(point.latitude, point.longitude))

    return points


class GPXReplaySource:
    """
    Replays a GPX file as if it were a live position stream.

    Needs a running asyncio loop: every subscription is a task that
    delivers one point per interval until the file is exhausted or
    the subscription is cancelled.

    Usage:
        source = GPXReplaySource(Path("ride.gpx"), interval_seconds=0.5)
        store = TrackStore(source)
        store.start()
        await source.wait_finished()
        store.stop()
    """

    def __init__(self, path: str | Path, interval_seconds: float = 1.0):
        self.path = Path(path)
        self.interval_seconds = interval_seconds
        self._tasks: dict[str, asyncio.Task] = {}

    def subscribe(self, options: WatchOptions, callback: SampleCallback) -> str:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            raise SourceError("GPX replay needs a running event loop")

        try:
            points = extract_points(self.path.read_bytes())
        except (OSError, ValueError) as e:
            raise SourceError(f"Cannot replay {self.path}: {e}") from e

        if not points:
            raise SourceError(f"GPX file contains no track or route points: {self.path}")

        handle = uuid.uuid4().hex
        task = loop.create_task(self._pump(points, callback))
        self._tasks[handle] = task
        task.add_done_callback(lambda _: self._tasks.pop(handle, None))
        logger.info(f"Replaying {len(points)} points from {self.path.name}")
        return handle

    def unsubscribe(self, handle: str) -> None:
        task = self._tasks.pop(handle, None)
        if task:
            task.cancel()

    async def wait_finished(self) -> None:
        """Wait until every active replay has delivered all its points."""
        tasks = list(self._tasks.values())
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _pump(self, points: List[GeoPoint], callback: SampleCallback) -> None:
        for index, point in enumerate(points):
            if index:
                await asyncio.sleep(self.interval_seconds)
            callback(point)
