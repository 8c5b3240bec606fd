"""
Tests for RecordingNotifier.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from track_recorder.features.tracking import (
    PushGeoSource,
    RecordingNotifier,
    SourceError,
    TrackStore,
)
from track_recorder.features.tracking.notifications import STARTED_TEXT, STOPPED_TEXT
from track_recorder.shared.telegram import TelegramNotifier


@pytest.fixture
def telegram():
    notifier = MagicMock(spec=TelegramNotifier)
    notifier.enabled = True
    notifier.send_message = AsyncMock(return_value=True)
    return notifier


class TestRecordingNotifier:
    """Tests for recording status notifications."""

    def test_start_and_stop_outside_event_loop(self, telegram):
        source = PushGeoSource()
        store = TrackStore(source)
        store.add_observer(RecordingNotifier(telegram))

        store.start()
        store.stop()

        texts = [call.args[0] for call in telegram.send_message.await_args_list]
        assert texts == [STARTED_TEXT, STOPPED_TEXT]

    def test_sends_in_background_inside_event_loop(self, telegram):
        store = TrackStore(PushGeoSource())
        notifications = RecordingNotifier(telegram)
        store.add_observer(notifications)

        async def run():
            store.start()
            # Not sent yet: the store never waits on the network
            telegram.send_message.assert_not_awaited()
            await notifications.drain()

        asyncio.run(run())

        telegram.send_message.assert_awaited_once_with(STARTED_TEXT)

    def test_source_failure_is_reported(self, telegram):
        source = PushGeoSource()
        store = TrackStore(source)
        store.add_observer(RecordingNotifier(telegram))
        store.start()

        source.publish_error(SourceError("permission revoked"))

        last_text = telegram.send_message.await_args_list[-1].args[0]
        assert "permission revoked" in last_text
        assert not store.is_recording

    def test_disabled_notifier_sends_nothing(self, telegram):
        telegram.enabled = False
        store = TrackStore(PushGeoSource())
        store.add_observer(RecordingNotifier(telegram))

        store.start()
        store.stop()

        telegram.send_message.assert_not_called()

    def test_send_failure_does_not_affect_recording(self, telegram):
        telegram.send_message = AsyncMock(side_effect=RuntimeError("network down"))
        source = PushGeoSource()
        store = TrackStore(source)
        store.add_observer(RecordingNotifier(telegram))

        store.start()
        source.publish(10.0, 10.0)

        assert store.is_recording
        assert store.point_count == 1
