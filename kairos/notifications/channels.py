"""NotificationChannel protocol — interface for outbound message delivery."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class NotificationChannel(Protocol):
    """Protocol that every transport must satisfy."""

    @property
    def name(self) -> str:
        """Unique channel identifier (e.g. 'telegram')."""
        ...

    @property
    def max_message_length(self) -> int:
        """Largest single message the transport accepts."""
        ...

    async def send(self, chat_id: str, message: str) -> bool:
        """Deliver text to a chat, splitting as needed. Returns True on success."""
        ...
