"""SMS provider interface and a logging-only implementation."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable

logger = logging.getLogger(__name__)


class Provider(ABC):
    """Delivers one message body to a set of recipients.

    Usage is fluent: ``provider.set_numbers(numbers).set_message(text).send()``.
    ``send`` raises :class:`~sms_dispatch.exceptions.DeliveryError` when the
    gateway rejects the batch; callers are expected to let it propagate.
    """

    def __init__(self) -> None:
        self.numbers: list[str] = []
        self.message: str = ""

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def set_numbers(self, numbers: Iterable[str]) -> Provider:
        self.numbers = list(numbers)
        return self

    def set_message(self, message: str) -> Provider:
        self.message = message
        return self

    @abstractmethod
    def send(self) -> None:
        """Deliver ``self.message`` to every number in ``self.numbers``."""
        ...


class ConsoleProvider(Provider):
    """Logs messages instead of sending them. For local runs and debugging."""

    def send(self) -> None:
        logger.info("--- Sending SMS (Console Provider) ---")
        for number in self.numbers:
            logger.info("To: %s", number)
        logger.info("Message: %s", self.message)
        logger.info("--------------------------------------")
