"""System prompt assembly."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kairos.config import settings
from kairos.scheduler.timeparse import now_local

if TYPE_CHECKING:
    from datetime import datetime

ASSISTANT_RULES = """\
You are Kairos, a helpful personal assistant chatting through Telegram.

Rules:
- Never mention tools, APIs or implementation details to the user.
- If no tool is needed, answer conversationally from your own knowledge.
- Use tools only for real-time information, storing or retrieving the user's
  data (lists, reminders), scheduling, and web search.
- Be concise, friendly and context-aware.
- Plain text only: no Markdown tables or headings.
- Confirm before destructive actions such as deleting a list or cancelling
  every reminder.
- Times the user gives are wall-clock times in the {timezone} timezone."""


def build_system_prompt(now: datetime | None = None) -> str:
    """Return the assistant rules followed by the current local time."""
    current = now_local(now)
    time_text = (
        f"Current time: {current.strftime('%A, %B %d, %Y %H:%M %Z')} "
        f"({settings.scheduler_timezone})"
    )
    rules = ASSISTANT_RULES.format(timezone=settings.scheduler_timezone)
    return f"{rules}\n\n{time_text}"
