"""Telegram message and command handlers."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from telegram.constants import ChatAction, ChatType

from kairos.bot.security import is_allowed
from kairos.llm.errors import AssistantError
from kairos.notifications.chunking import split_message
from kairos.notifications.context import MessageContext
from kairos.notifications.telegram_channel import TELEGRAM_MAX_MESSAGE_LENGTH

if TYPE_CHECKING:
    from telegram import Message, Update
    from telegram.ext import ContextTypes

logger = logging.getLogger(__name__)

GREETING = "Hello! I'm Kairos, your personal assistant. How can I help you?"
GENERIC_FAILURE = "Sorry, something went wrong processing your request."


def is_addressed_to_bot(message: Message, bot_id: int, bot_username: str | None) -> bool:
    """Group messages count only when they @-mention the bot or reply to it."""
    if message.chat.type == ChatType.PRIVATE:
        return True
    text = message.text or ""
    if bot_username and f"@{bot_username}".lower() in text.lower():
        return True
    replied = message.reply_to_message
    return bool(replied and replied.from_user and replied.from_user.id == bot_id)


def strip_mention(text: str, bot_username: str | None) -> str:
    if not bot_username:
        return text.strip()
    return re.sub(rf"@{re.escape(bot_username)}\b", "", text, flags=re.IGNORECASE).strip()


def build_context(update: Update) -> MessageContext:
    chat = update.effective_chat
    user = update.effective_user
    return MessageContext(
        user_id=str(user.id),
        channel_id=str(chat.id),
        group_id=None if chat.type == ChatType.PRIVATE else str(chat.id),
        username=user.username or "",
    )


async def reply_chunked(message: Message, text: str) -> None:
    for chunk in split_message(text, TELEGRAM_MAX_MESSAGE_LENGTH):
        await message.reply_text(chunk)


async def handle_start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start — greet the user."""
    if not is_allowed(update):
        return

    await update.effective_message.reply_text(GREETING)


async def handle_clear(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /clear — reset this chat's conversation history."""
    if not is_allowed(update):
        return

    history = context.application.bot_data["history"]
    count = await history.clear(str(update.effective_chat.id))
    await update.effective_message.reply_text(f"Cleared {count} messages. Starting fresh.")


async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Run the assistant on an incoming text message and reply with its answer."""
    if not is_allowed(update):
        return

    message = update.effective_message
    bot = context.bot
    if not is_addressed_to_bot(message, bot.id, bot.username):
        return

    content = strip_mention(message.text or "", bot.username)
    if not content:
        await message.reply_text(GREETING)
        return

    logger.info("Message from %s in %s: %s", update.effective_user.id, message.chat.id, content[:80])
    await bot.send_chat_action(chat_id=message.chat.id, action=ChatAction.TYPING)

    assistant = context.application.bot_data["assistant"]
    try:
        answer = await assistant.run(build_context(update), content)
    except AssistantError as exc:
        logger.warning("Assistant run failed: %s", exc.advisory)
        await message.reply_text(exc.advisory)
        return
    except Exception:
        logger.exception("Error generating response")
        await message.reply_text(GENERIC_FAILURE)
        return

    await reply_chunked(message, answer or "I got an empty response. Try again?")
