from __future__ import annotations

import argparse
import logging
import sys

from .config import get_settings
from .db import SessionLocal, init_db
from .decorators import clamp_sms
from .exceptions import SmsError
from .provider import ConsoleProvider
from .service import SmsService, resolve_provider
from .store import SqlAlchemyMessageStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sms-dispatch",
        description="Record an SMS for each number and deliver it when APP_ENV=production.",
    )
    parser.add_argument("numbers", nargs="+", help="recipient phone numbers, any formatting")
    parser.add_argument("-m", "--message", required=True)
    parser.add_argument(
        "--console",
        action="store_true",
        help="log messages with the console provider instead of the configured gateway",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = get_settings()
    # The console provider delivers nothing, so rows must never be flagged as sent.
    deliver = settings.is_production and not args.console
    init_db()
    db = SessionLocal()
    try:
        provider = (
            ConsoleProvider()
            if args.console
            else resolve_provider(settings.provider_credentials(), is_production=settings.is_production)
        )
        service = SmsService(
            provider=provider,
            store=SqlAlchemyMessageStore(db),
            is_production=deliver,
            decorator=clamp_sms(settings.max_sms_chars),
        )
        record_ids = service.push(args.numbers, args.message)
    except SmsError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    finally:
        db.close()

    print(f"recorded: {', '.join(str(i) for i in record_ids)}")
    if args.console:
        print("not delivered (console provider)")
    elif not deliver:
        print(f"not delivered (APP_ENV={settings.app_env})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
