"""
Recording notifications.

Tells the user that recording is running in the background, and
that it stopped. Purely informational: failures never touch the track.
"""

import asyncio
import logging
from typing import Coroutine, Optional

from track_recorder.shared.telegram import TelegramNotifier, get_telegram_notifier

from .exceptions import SourceError
from .ports import TrackObserver

logger = logging.getLogger(__name__)

STARTED_TEXT = "<b>GPS Трекер активен</b>\nИдет запись вашего маршрута."
STOPPED_TEXT = "<b>GPS Трекер</b>\nЗапись маршрута остановлена."
FAILED_TEXT = "<b>GPS Трекер</b>\nЗапись остановлена: {error}"


class RecordingNotifier(TrackObserver):
    """
    Store observer pushing recording status to Telegram.

    Messages are sent as background tasks when an event loop is running,
    so the store never waits on the network.
    """

    def __init__(self, notifier: Optional[TelegramNotifier] = None):
        self.notifier = notifier or get_telegram_notifier()
        # Keep strong references to pending sends to prevent GC
        self._pending: set[asyncio.Task] = set()

    def on_recording_started(self) -> None:
        logger.info("Recording notification: started")
        self._send(STARTED_TEXT)

    def on_recording_stopped(self) -> None:
        logger.info("Recording notification: stopped")
        self._send(STOPPED_TEXT)

    def on_source_failed(self, error: SourceError) -> None:
        self._send(FAILED_TEXT.format(error=error))

    async def drain(self) -> None:
        """Wait for pending sends (used on shutdown)."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _send(self, text: str) -> None:
        if not self.notifier.enabled:
            return
        self._spawn(self.notifier.send_message(text))

    def _spawn(self, coro: Coroutine) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Synchronous caller (CLI): just send it
            asyncio.run(coro)
            return

        task = loop.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
