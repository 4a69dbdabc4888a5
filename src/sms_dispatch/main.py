from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request
from sqlalchemy.orm import Session

from .config import Settings, get_settings
from .db import SessionLocal, init_db
from .decorators import clamp_sms
from .exceptions import ConfigurationError, DeliveryError, ValidationError
from .provider import Provider
from .service import SmsService, resolve_provider
from .sms import OutboundSms, SendResult, SmsRecord
from .store import SqlAlchemyMessageStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: runs once before the app starts serving requests
    init_db()
    yield
    # Shutdown: runs once when the app is shutting down (nothing to do yet)


app = FastAPI(title="sms-dispatch", version="0.1.0", lifespan=lifespan)

# --- Admin protection ---

ALLOWED_ADMIN_IPS = {"127.0.0.1", "::1"}


def verify_admin(request: Request, settings: Settings = Depends(get_settings)) -> None:
    """
    Simple protection for /admin endpoints:
    - only allow requests from ALLOWED_ADMIN_IPS
    - require X-Admin-Token header that matches ADMIN_TOKEN env var
    """
    client_host = request.client.host if request.client else None

    if client_host not in ALLOWED_ADMIN_IPS:
        raise HTTPException(status_code=403, detail="Forbidden")

    if not settings.admin_token:
        # Misconfiguration; safer to refuse access than to expose data.
        raise HTTPException(status_code=500, detail="ADMIN_TOKEN not configured")

    header_token = request.headers.get("X-Admin-Token")
    if header_token != settings.admin_token:
        raise HTTPException(status_code=401, detail="Invalid admin token")


# --- Dependencies ---


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_provider(settings: Settings = Depends(get_settings)) -> Provider:
    try:
        return resolve_provider(settings.provider_credentials(), is_production=settings.is_production)
    except ConfigurationError as exc:
        logger.error("SMS provider misconfigured: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc


# --- Routes ---


@app.post("/sms/send", response_model=SendResult)
def send_sms(
    payload: OutboundSms,
    db: Session = Depends(get_db),
    provider: Provider = Depends(get_provider),
    settings: Settings = Depends(get_settings),
) -> SendResult:
    """
    Record and (in production) deliver one message to a list of numbers.

    Accepts JSON:

      { "numbers": ["9045344321", "+7 904-534-23-14"], "message": "Hello" }
    """
    service = SmsService(
        provider=provider,
        store=SqlAlchemyMessageStore(db),
        is_production=settings.is_production,
        decorator=clamp_sms(settings.max_sms_chars),
    )
    try:
        record_ids = service.push(payload.numbers, payload.message)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except DeliveryError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return SendResult(record_ids=record_ids, sent=settings.is_production)


@app.get("/admin/messages", response_model=list[SmsRecord])
def admin_messages(
    limit: int = 50,
    db: Session = Depends(get_db),
    _: None = Depends(verify_admin),
) -> list[SmsRecord]:
    """
    Inspect the most recent outbound SMS records.

    Example:
      GET /admin/messages
      GET /admin/messages?limit=10
    """
    # Clamp limit to a reasonable range
    safe_limit = max(1, min(limit, 200))
    rows = SqlAlchemyMessageStore(db).recent(safe_limit)
    return [SmsRecord.model_validate(row) for row in rows]
