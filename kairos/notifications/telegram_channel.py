"""Telegram implementation of the NotificationChannel protocol."""

from __future__ import annotations

import logging

import telegram

from kairos.notifications.chunking import split_message

logger = logging.getLogger(__name__)

TELEGRAM_MAX_MESSAGE_LENGTH = 4096


class TelegramChannel:
    """Sends messages via the Telegram Bot API."""

    def __init__(self, bot: telegram.Bot) -> None:
        self._bot = bot

    @property
    def name(self) -> str:
        return "telegram"

    @property
    def max_message_length(self) -> int:
        return TELEGRAM_MAX_MESSAGE_LENGTH

    async def send(self, chat_id: str, message: str) -> bool:
        """Send plain text to a Telegram chat, one message per chunk."""
        try:
            for chunk in split_message(message, self.max_message_length):
                await self._bot.send_message(chat_id=int(chat_id), text=chunk)
            return True
        except Exception:
            logger.exception("TelegramChannel.send failed for chat_id=%s", chat_id)
            return False
