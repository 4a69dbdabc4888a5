"""Phone number cleanup."""

from __future__ import annotations

import re
from typing import Protocol, runtime_checkable

_NON_DIGITS = re.compile(r"\D+", re.ASCII)


@runtime_checkable
class Sanitizer(Protocol):
    def sanitize(self, raw: str) -> str: ...


class DigitSanitizer:
    """Strip everything that isn't a decimal digit: "+7 (904) 534-23-14" -> "79045342314"."""

    def sanitize(self, raw: str) -> str:
        return _NON_DIGITS.sub("", raw)
