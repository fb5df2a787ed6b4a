"""MessageContext — identifies who is asking and where replies go."""

from dataclasses import dataclass


@dataclass
class MessageContext:
    """Context for one assistant run, live or scheduled.

    Attributes:
        user_id: The acting user (event owner for scheduled runs).
        channel_id: Chat the reply is delivered to; also keys conversation history.
        group_id: Group chat the request came from, None for private chats.
        username: Display handle of the user, when known.
    """

    user_id: str
    channel_id: str
    group_id: str | None = None
    username: str = ""
