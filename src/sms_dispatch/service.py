"""
Outbound SMS orchestration.

Usage::

    service = SmsService(provider=provider, store=store, is_production=True)
    service.set_numbers(["9045344321", "+7 904-534-23-14"]).set_message("Test").send()

    # or in one go
    SmsService(["9045344321"], "Test", provider, store=store).send()

    # or
    SmsService(provider=provider, store=store).push(["9045344321"], "Test")

Every recipient gets a row in ``sms_messages`` whatever the environment.
The provider is only called when ``is_production`` is set, after which the
rows are flagged ``is_real_send``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .config import ProviderCredentials
from .decorators import MessageDecorator, identity
from .exceptions import ConfigurationError, ValidationError
from .provider import ConsoleProvider, Provider
from .sanitizer import DigitSanitizer, Sanitizer
from .store import MessageStore
from .twilio_client import TwilioProvider

logger = logging.getLogger(__name__)

VALID_LENGTHS = frozenset({10, 11})


class SmsService:
    def __init__(
        self,
        numbers: Iterable[str] | None = None,
        message: str = "",
        provider: Provider | None = None,
        *,
        store: MessageStore,
        is_production: bool = False,
        sanitizer: Sanitizer | None = None,
        decorator: MessageDecorator | None = None,
    ) -> None:
        if provider is None:
            raise ConfigurationError(
                "SMS provider is not configured: pass one to SmsService or build it "
                "with default_provider()"
            )

        self._numbers: list[str] = []
        self._message = ""
        self._decorator: MessageDecorator = decorator or identity
        self._sanitizer: Sanitizer = sanitizer or DigitSanitizer()
        self._provider = provider
        self._store = store
        self.is_production = is_production

        self.set_message(message)
        self.set_numbers(numbers or [])

    @property
    def numbers(self) -> tuple[str, ...]:
        return tuple(self._numbers)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider(self) -> Provider:
        return self._provider

    def set_message(self, text: str) -> SmsService:
        self._message = self._decorator(text)
        return self

    def set_message_decorator(self, fn: MessageDecorator) -> SmsService:
        # Only affects later set_message() calls.
        self._decorator = fn
        return self

    def add_number(self, number: str) -> SmsService:
        clean = self._sanitizer.sanitize(str(number))

        if len(clean) not in VALID_LENGTHS:
            raise ValidationError(clean)

        if clean in self._numbers:
            logger.debug("Skipping duplicate number %s", clean)
        else:
            self._numbers.append(clean)

        return self

    def set_numbers(self, numbers: Iterable[str]) -> SmsService:
        # Not atomic: numbers before the first invalid one stay added.
        for number in numbers:
            self.add_number(number)
        return self

    def set_sanitizer(self, sanitizer: Sanitizer) -> SmsService:
        self._sanitizer = sanitizer
        return self

    def set_provider(self, provider: Provider) -> SmsService:
        self._provider = provider
        return self

    def push(self, numbers: Iterable[str], message: str) -> list[int]:
        self.set_message(message)
        self.set_numbers(numbers)
        return self.send()

    def send(self) -> list[int]:
        """
        Record one row per recipient, then deliver if running in production.

        Returns the ids of the created rows. Provider errors propagate as-is;
        the rows written before the failure stay ``is_real_send=False``.
        """
        record_ids = [
            self._store.create(number, self._message, is_real_send=False)
            for number in self._numbers
        ]

        if not record_ids:
            logger.info("No recipients set; nothing to send")
            return record_ids

        if not self.is_production:
            logger.info(
                "Recorded %d SMS without delivery (non-production environment)",
                len(record_ids),
            )
            return record_ids

        try:
            self._provider.set_numbers(self._numbers).set_message(self._message).send()
        except Exception:
            logger.exception(
                "%s failed to deliver SMS; records %s left as not sent",
                self._provider.name,
                record_ids,
            )
            raise

        self._store.mark_real_send(record_ids, True)
        logger.info("Sent %d SMS via %s", len(record_ids), self._provider.name)
        return record_ids


def default_provider(credentials: ProviderCredentials) -> Provider:
    """Build the default gateway provider from explicit credentials."""
    login, password, sign = credentials.login, credentials.password, credentials.sign
    if not (login and password and sign):
        raise ConfigurationError(
            "Default SMS provider needs login, password and sign (SMS_LOGIN / SMS_PASSWORD / SMS_SIGN)"
        )
    return TwilioProvider(login, password, sign, country_code=credentials.country_code)


def resolve_provider(credentials: ProviderCredentials, *, is_production: bool) -> Provider:
    """
    Default provider for the CLI and HTTP surfaces.

    Outside production, missing credentials fall back to ConsoleProvider
    (nothing is sent there anyway). In production they are a ConfigurationError.
    """
    try:
        return default_provider(credentials)
    except ConfigurationError:
        if is_production:
            raise
        logger.warning("SMS credentials not configured. Falling back to ConsoleProvider.")
        return ConsoleProvider()


def quick(
    number: str,
    message: str,
    *,
    store: MessageStore,
    is_production: bool,
    provider: Provider | None = None,
    credentials: ProviderCredentials | None = None,
) -> list[int]:
    """One-shot send of ``message`` to a single ``number`` with a fresh SmsService."""
    if provider is None:
        if credentials is None:
            raise ConfigurationError("quick() needs either a provider or provider credentials")
        provider = default_provider(credentials)

    service = SmsService([number], message, provider, store=store, is_production=is_production)
    return service.send()
