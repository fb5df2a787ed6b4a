"""Per-channel conversation history and per-user token accounting."""

from kairos.memory.history import HistoryStore, Turn
from kairos.memory.usage import TokenUsage, UsageStore

__all__ = ["HistoryStore", "TokenUsage", "Turn", "UsageStore"]
