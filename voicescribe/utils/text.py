from __future__ import annotations

"""Text helpers for Telegram replies."""

TELEGRAM_MESSAGE_LIMIT = 4096


def split_message(text: str, limit: int = TELEGRAM_MESSAGE_LIMIT) -> list[str]:
    """Split ``text`` into chunks no longer than ``limit``.

    Prefers breaking at a newline, then at a space, as long as the break
    keeps at least half a window of text; otherwise cuts at the limit.
    """
    if limit <= 0:
        raise ValueError("limit must be positive")
    chunks: list[str] = []
    rest = text
    while len(rest) > limit:
        window = rest[:limit]
        floor = max(limit // 2, 1)
        cut = window.rfind("\n")
        if cut < floor:
            cut = window.rfind(" ")
        if cut < floor:
            cut = limit
        chunks.append(rest[:cut])
        rest = rest[cut:].lstrip("\n ")
    if rest or not chunks:
        chunks.append(rest)
    return chunks
