"""
Telegram push for recording status.

Stands in for the "recording is running" system notification: one
configured chat receives a short message when recording starts,
stops or fails.
"""

import logging
from typing import Optional

import httpx

from track_recorder.config import settings

logger = logging.getLogger(__name__)


class TelegramNotifier:
    """
    Sends recording status messages to TELEGRAM_CHAT_ID.

    Disabled unless both the bot token and the chat id are configured.
    Delivery problems are logged and reported as False; they never
    reach the recorder.
    """

    API_URL = "https://api.telegram.org"
    TIMEOUT_SECONDS = 10.0

    def __init__(
        self,
        bot_token: Optional[str] = None,
        chat_id: Optional[int] = None
    ):
        self.bot_token = bot_token or settings.telegram_bot_token
        self.chat_id = chat_id or settings.telegram_chat_id
        self._enabled = bool(self.bot_token and self.chat_id)

        if not self._enabled:
            logger.info("Recording notifications off: Telegram bot token or chat id not set")

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def send_message(self, text: str, parse_mode: str = "HTML") -> bool:
        """
        Deliver one status message.

        Returns:
            True if Telegram accepted the message
        """
        if not self._enabled:
            return False

        url = f"{self.API_URL}/bot{self.bot_token}/sendMessage"
        payload = {"chat_id": self.chat_id, "text": text, "parse_mode": parse_mode}

        try:
            async with httpx.AsyncClient(timeout=self.TIMEOUT_SECONDS) as client:
                response = await client.post(url, json=payload)
        except httpx.TimeoutException:
            logger.warning("Recording notification timed out")
            return False
        except httpx.HTTPError as e:
            logger.error(f"Recording notification failed: {e}")
            return False

        if response.status_code != 200:
            logger.warning(
                f"Telegram rejected recording notification: "
                f"{response.status_code} - {response.text}"
            )
            return False

        logger.debug("Recording notification delivered")
        return True


_notifier: Optional[TelegramNotifier] = None


def get_telegram_notifier() -> TelegramNotifier:
    """Shared notifier built from settings on first use."""
    global _notifier
    if _notifier is None:
        _notifier = TelegramNotifier()
    return _notifier
