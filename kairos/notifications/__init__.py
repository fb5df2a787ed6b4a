"""Outbound message delivery."""

from kairos.notifications.channels import NotificationChannel
from kairos.notifications.chunking import split_message
from kairos.notifications.context import MessageContext
from kairos.notifications.telegram_channel import TelegramChannel

__all__ = [
    "MessageContext",
    "NotificationChannel",
    "TelegramChannel",
    "split_message",
]
