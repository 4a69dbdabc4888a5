from __future__ import annotations

import logging

from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client

from .exceptions import DeliveryError
from .provider import Provider

logger = logging.getLogger(__name__)


class TwilioProvider(Provider):
    """
    Default gateway provider.

    Maps the generic login / password / sign credentials onto Twilio's
    account SID / auth token / sender number. Twilio has no multi-recipient
    endpoint, so one message is created per number.
    """

    def __init__(
        self,
        login: str,
        password: str,
        sign: str,
        country_code: str = "7",
        client: Client | None = None,
    ) -> None:
        super().__init__()
        self.sign = sign
        self.country_code = country_code
        self._client = client or Client(login, password)

    def to_e164(self, number: str) -> str:
        """
        Stored numbers are digits only: 10 digits is a national number,
        11 digits already carries the country code.
        """
        if len(number) == 10:
            return f"+{self.country_code}{number}"
        if len(number) == 11:
            return f"+{number}"
        raise DeliveryError(f"Cannot address {number!r}: expected 10 or 11 digits")

    def send(self) -> None:
        if not self.numbers:
            raise DeliveryError("No recipients set on provider")

        # Resolve every address before the first message goes out
        addresses = [(number, self.to_e164(number)) for number in self.numbers]

        for number, to in addresses:
            try:
                result = self._client.messages.create(
                    to=to,
                    from_=self.sign,
                    body=self.message,
                )
            except TwilioRestException as exc:
                raise DeliveryError(f"Twilio rejected message to {number}: {exc.msg}") from exc
            logger.info("Twilio accepted message to %s (sid=%s)", to, result.sid)
