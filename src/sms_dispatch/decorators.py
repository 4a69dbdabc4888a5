"""
Ready-made message decorators.

A decorator is any ``Callable[[str], str]``. It is applied once, when the
message is set on :class:`~sms_dispatch.service.SmsService`, not at send time.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Final

MessageDecorator = Callable[[str], str]

ELLIPSIS: Final[str] = "..."


def identity(text: str) -> str:
    return text


def clamp_sms(max_chars: int) -> MessageDecorator:
    """
    Keep the SMS body within ``max_chars``.

    Longer bodies are cut and end with "..." so the recipient can tell
    the text was shortened.
    """
    if max_chars <= 0:
        raise ValueError("max_chars must be positive")

    def _clamp(text: str) -> str:
        if len(text) <= max_chars:
            return text

        # If the marker itself doesn't fit, hard-cut the text.
        if len(ELLIPSIS) >= max_chars:
            return text[:max_chars]

        allowed = max_chars - len(ELLIPSIS)
        return text[:allowed].rstrip() + ELLIPSIS

    return _clamp

