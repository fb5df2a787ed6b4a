"""Assistant failures and their user-facing advisories."""

from __future__ import annotations

import asyncio

import anthropic

ADVISORIES: dict[str, str] = {
    "timeout": "The assistant took too long to answer. Please try again in a moment.",
    "rate_limit": (
        "The assistant is receiving too many requests right now. "
        "Please wait a minute and try again."
    ),
    "auth": "The assistant could not authenticate with its model provider. Please check the API key.",
    "upstream": "The assistant's model provider is having trouble right now. Please try again later.",
    "network": "Could not reach the assistant's model provider. Please try again shortly.",
}

# Checked in order; the first kind with a matching marker wins.
_TEXT_MARKERS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("timeout", ("timeout", "timed out", "etimedout")),
    ("rate_limit", ("rate limit", "rate_limit", "429", "too many requests")),
    ("auth", ("401", "403", "unauthorized", "authentication", "permission denied", "api key")),
    (
        "upstream",
        ("500", "502", "503", "504", "529", "overloaded", "internal server error", "bad gateway",
         "service unavailable"),
    ),
    ("network", ("econnrefused", "econnreset", "enotfound", "connection", "network")),
)


class AssistantError(Exception):
    """A failed assistant turn with a message safe to show the user."""

    def __init__(self, advisory: str) -> None:
        super().__init__(advisory)
        self.advisory = advisory


class UpstreamError(AssistantError):
    """The model provider failed (timeout, rate limit, auth, 5xx, network)."""

    def __init__(self, kind: str) -> None:
        super().__init__(ADVISORIES[kind])
        self.kind = kind


class ToolRoundLimitError(AssistantError):
    """The model kept asking for tools past the configured round limit."""

    def __init__(self, rounds: int) -> None:
        super().__init__(
            "Sorry, I could not complete that request: it needed too many tool steps."
        )
        self.rounds = rounds


def _kind_from_type(exc: BaseException) -> str | None:
    # APITimeoutError subclasses APIConnectionError, so it goes first.
    if isinstance(exc, (asyncio.TimeoutError, anthropic.APITimeoutError)):
        return "timeout"
    if isinstance(exc, anthropic.RateLimitError):
        return "rate_limit"
    if isinstance(exc, (anthropic.AuthenticationError, anthropic.PermissionDeniedError)):
        return "auth"
    if isinstance(exc, anthropic.InternalServerError):
        return "upstream"
    if isinstance(exc, anthropic.APIConnectionError):
        return "network"
    return None


def classify_error(exc: BaseException) -> UpstreamError | None:
    """Map an exception to an UpstreamError, or None if it is not an upstream failure."""
    kind = _kind_from_type(exc)
    if kind is None:
        text = f"{type(exc).__name__} {exc}".lower()
        kind = next(
            (name for name, markers in _TEXT_MARKERS if any(m in text for m in markers)),
            None,
        )
    return UpstreamError(kind) if kind else None
