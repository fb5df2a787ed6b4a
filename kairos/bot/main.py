"""Kairos bot entry point."""

import logging

from kairos.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """Configure root logging from settings."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file, encoding="utf-8"))
    logging.basicConfig(
        format=LOG_FORMAT,
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        handlers=handlers,
    )
    # Per-request and per-tick chatter
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)


def main() -> None:
    """Start the bot on Telegram."""
    setup_logging()

    from kairos.bot.app import create_app

    if not settings.telegram_bot_token:
        raise SystemExit("TELEGRAM_BOT_TOKEN is not set")

    allowed = settings.get_allowed_user_ids()
    if not allowed:
        logger.warning("ALLOWED_USER_IDS is empty, bot will reject all messages")
    else:
        logger.info("Allowed user IDs: %s", allowed)

    logger.info(
        "Starting Kairos on Telegram with model %s (tz=%s)...",
        settings.chat_model,
        settings.scheduler_timezone,
    )
    app = create_app(settings.telegram_bot_token)
    app.run_polling()


if __name__ == "__main__":
    main()
