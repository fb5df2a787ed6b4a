"""User allowlist security gate."""

import logging

from telegram import Update

from kairos.config import settings

logger = logging.getLogger(__name__)


def is_allowed(update: Update, allowed: set[int] | None = None) -> bool:
    """Check if the update is from an allowed user.

    Returns False (silently rejected) for unknown users. An empty allowlist
    rejects everyone.
    """
    user = update.effective_user
    if user is None or user.is_bot:
        return False

    if allowed is None:
        allowed = settings.get_allowed_user_ids()
    if not allowed:
        logger.warning("ALLOWED_USER_IDS is empty, rejecting all messages")
        return False

    return user.id in allowed
