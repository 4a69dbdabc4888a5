from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field

PROJECT_ROOT = Path(__file__).resolve().parents[2]


class ProviderCredentials(BaseModel):
    """Login / password / sender signature for the default SMS gateway."""

    login: str | None = None
    password: str | None = None
    sign: str | None = None
    # Prepended to 10-digit national numbers before they go to the gateway
    country_code: str = "7"


class Settings(BaseModel):
    # Env vars are read when the model is built (not at import),
    # so get_settings.cache_clear() picks up new values.

    # Project root (repo root in local dev, /app in Docker)
    project_root: Path = PROJECT_ROOT

    # Database URL:
    # - Default for local dev: sqlite file in the project root (sms_dispatch.db)
    # - Override in Docker / production using the DATABASE_URL env var
    database_url: str = Field(
        default_factory=lambda: os.getenv(
            "DATABASE_URL", f"sqlite:///{PROJECT_ROOT / 'sms_dispatch.db'}"
        )
    )

    # Real SMS are only sent when APP_ENV=production; everything else just records them.
    app_env: str = Field(default_factory=lambda: os.getenv("APP_ENV", "local"))

    # --- Default gateway credentials (Twilio: account SID / auth token / from number) ---
    sms_login: str | None = Field(default_factory=lambda: os.getenv("SMS_LOGIN"))
    sms_password: str | None = Field(default_factory=lambda: os.getenv("SMS_PASSWORD"))
    sms_sign: str | None = Field(default_factory=lambda: os.getenv("SMS_SIGN"))
    sms_country_code: str = Field(default_factory=lambda: os.getenv("SMS_COUNTRY_CODE", "7"))

    admin_token: str | None = Field(default_factory=lambda: os.getenv("ADMIN_TOKEN"))

    # Upper bound for outgoing bodies (~2 GSM-7 segments)
    max_sms_chars: int = Field(default_factory=lambda: int(os.getenv("MAX_SMS_CHARS", "320")))

    @property
    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    def provider_credentials(self) -> ProviderCredentials:
        return ProviderCredentials(
            login=self.sms_login,
            password=self.sms_password,
            sign=self.sms_sign,
            country_code=self.sms_country_code,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
