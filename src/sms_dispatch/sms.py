from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class OutboundSms(BaseModel):
    numbers: list[str] = Field(min_length=1)
    message: str


class SendResult(BaseModel):
    status: str = "ok"
    record_ids: list[int]
    sent: bool


class SmsRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    number: str
    message: str
    is_real_send: bool
    created_at: datetime
