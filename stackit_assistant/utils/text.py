"""
Helpers for chat text: cleaning intake replies and shortening log lines.
"""
import re

_WHITESPACE = re.compile(r"\s+")


def clean_reply(reply: str) -> str:
    """Intake reply as it is stored on the record; blank input gives ''."""
    return _WHITESPACE.sub(" ", reply or "").strip()


def log_preview(text: str, limit: int = 60) -> str:
    """Single-line preview of a chat message for log output."""
    flat = clean_reply(text)
    if len(flat) <= limit:
        return flat
    return flat[:limit - 3].rstrip() + "..."
