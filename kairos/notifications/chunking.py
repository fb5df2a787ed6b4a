"""Split long text into transport-sized messages."""

from __future__ import annotations


def split_message(text: str, limit: int) -> list[str]:
    """Split *text* into chunks of at most *limit* characters.

    Breaks at the last newline, or failing that the last space, before the
    limit so words and URLs stay intact. A single token longer than *limit*
    is cut at the limit.
    """
    if limit <= 0:
        msg = f"limit must be positive, got {limit}"
        raise ValueError(msg)

    chunks: list[str] = []
    remaining = text
    while len(remaining) > limit:
        window = remaining[: limit + 1]
        cut = window.rfind("\n")
        if cut <= 0:
            cut = window.rfind(" ")
        if cut <= 0:
            cut = limit
        chunk = remaining[:cut].rstrip()
        if chunk:
            chunks.append(chunk)
        remaining = remaining[cut:].lstrip()
    if remaining.strip() or not chunks:
        chunks.append(remaining)
    return chunks
