"""Application settings loaded from environment variables."""

import os
from pathlib import Path
from zoneinfo import ZoneInfo

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_file() -> str | None:
    if os.getenv("PYTEST_CURRENT_TEST"):
        return None
    return ".env"


class Settings(BaseSettings):
    """Kairos configuration. All values come from environment variables."""

    # Telegram
    telegram_bot_token: str = Field(default="")
    allowed_user_ids: str = Field(default="")

    # Anthropic
    anthropic_api_key: str = Field(default="")
    chat_model: str = Field(default="claude-sonnet-4-5-20250929")
    max_tokens: int = Field(default=4096)
    model_timeout_seconds: float = Field(default=120.0)
    max_tool_rounds: int = Field(default=5)

    # Database (event ledger, conversation history, token usage, lists)
    database_path: Path = Field(default=Path("data/kairos.db"))

    # Conversation
    conversation_window_size: int = Field(default=20)

    # Scheduler
    scheduler_timezone: str = Field(default="Europe/Paris")

    # Brave Search (web research)
    brave_search_api_key: str = Field(default="")

    # Logging
    log_level: str = Field(default="INFO")
    log_file: str = Field(default="")

    model_config = SettingsConfigDict(env_file=_env_file(), env_file_encoding="utf-8")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        if os.getenv("PYTEST_CURRENT_TEST"):
            return (init_settings,)
        return (init_settings, env_settings, dotenv_settings, file_secret_settings)

    @property
    def tz(self) -> ZoneInfo:
        """The fixed civil timezone all schedules are anchored to."""
        return ZoneInfo(self.scheduler_timezone)

    def get_allowed_user_ids(self) -> set[int]:
        """Parse ALLOWED_USER_IDS into a set of ints."""
        if not self.allowed_user_ids.strip():
            return set()
        return {int(uid.strip()) for uid in self.allowed_user_ids.split(",") if uid.strip()}


settings = Settings()
