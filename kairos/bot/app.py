"""Telegram application factory and service wiring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from telegram.ext import Application, CommandHandler, MessageHandler, filters

from kairos.bot.handlers import handle_clear, handle_message, handle_start
from kairos.lists.store import ListStore
from kairos.llm.agent import Assistant
from kairos.llm.client import ChatModel
from kairos.memory.history import HistoryStore
from kairos.memory.usage import UsageStore
from kairos.notifications.telegram_channel import TelegramChannel
from kairos.scheduler.engine import SchedulerEngine
from kairos.scheduler.executor import TaskExecutor
from kairos.scheduler.store import EventLedger
from kairos.tools import build_registry

if TYPE_CHECKING:
    from pathlib import Path

    from kairos.notifications.channels import NotificationChannel

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Everything a running bot needs, built once at startup."""

    ledger: EventLedger
    history: HistoryStore
    usage: UsageStore
    lists: ListStore
    assistant: Assistant
    engine: SchedulerEngine


def build_services(
    transport: NotificationChannel,
    model: ChatModel | None = None,
    db_path: Path | None = None,
) -> Services:
    """Construct the stores, the assistant and the firing loop around *transport*."""
    ledger = EventLedger(db_path)
    history = HistoryStore(db_path)
    usage = UsageStore(db_path)
    lists = ListStore(db_path)

    registry = build_registry(ledger, lists, history, usage)
    assistant = Assistant(model or ChatModel(), registry, history, usage)
    executor = TaskExecutor(ledger, transport, assistant.run)
    engine = SchedulerEngine(ledger, executor)
    logger.info("Services ready with tools: %s", ", ".join(registry.tool_names))

    return Services(
        ledger=ledger,
        history=history,
        usage=usage,
        lists=lists,
        assistant=assistant,
        engine=engine,
    )


async def _post_init(app: Application) -> None:
    """Start the firing loop once the event loop is running."""
    await app.bot_data["engine"].start()


async def _post_shutdown(app: Application) -> None:
    engine = app.bot_data.get("engine")
    if engine is not None:
        await engine.stop()


def create_app(token: str) -> Application:
    """Build and configure the Telegram application."""
    app = Application.builder().token(token).concurrent_updates(True).build()

    services = build_services(TelegramChannel(app.bot))
    app.bot_data["assistant"] = services.assistant
    app.bot_data["history"] = services.history
    app.bot_data["engine"] = services.engine

    app.add_handler(CommandHandler("start", handle_start))
    app.add_handler(CommandHandler("clear", handle_clear))
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, handle_message))

    app.post_init = _post_init
    app.post_shutdown = _post_shutdown

    return app
