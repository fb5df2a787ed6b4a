"""Per-user named lists (todo, groceries, ...)."""

from kairos.lists.store import ListStore

__all__ = ["ListStore"]
