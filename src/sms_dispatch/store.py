from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from .db import SmsMessage


class MessageStore(Protocol):
    """Where outbound SMS records are kept."""

    def create(self, number: str, message: str, is_real_send: bool = False) -> int: ...

    def mark_real_send(self, ids: Iterable[int], is_real_send: bool = True) -> None: ...


class SqlAlchemyMessageStore:
    """MessageStore backed by the ``sms_messages`` table.

    The session belongs to the caller; this class commits but never closes it.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def create(self, number: str, message: str, is_real_send: bool = False) -> int:
        row = SmsMessage(number=number, message=message, is_real_send=is_real_send)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row.id

    def mark_real_send(self, ids: Iterable[int], is_real_send: bool = True) -> None:
        id_list = list(ids)
        if not id_list:
            return
        self.db.execute(
            update(SmsMessage)
            .where(SmsMessage.id.in_(id_list))
            .values(is_real_send=is_real_send)
            .execution_options(synchronize_session="fetch")
        )
        self.db.commit()

    def get(self, record_id: int) -> SmsMessage | None:
        return self.db.get(SmsMessage, record_id)

    def recent(self, limit: int = 50) -> list[SmsMessage]:
        stmt = select(SmsMessage).order_by(SmsMessage.id.desc()).limit(limit)
        return list(self.db.scalars(stmt))
