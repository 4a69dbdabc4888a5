from __future__ import annotations


class SmsError(Exception):
    """Base class for errors raised by sms_dispatch."""


class ConfigurationError(SmsError):
    """No usable SMS provider (missing provider or incomplete credentials)."""


class ValidationError(SmsError):
    """A phone number does not sanitize to 10 or 11 digits."""

    def __init__(self, number: str, message: str | None = None) -> None:
        self.number = number
        super().__init__(
            message or f"Phone number must have 10 or 11 digits. Error with number {number!r}"
        )


class DeliveryError(SmsError):
    """The SMS gateway failed to accept a message."""
