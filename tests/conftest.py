from __future__ import annotations

from collections.abc import Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from sms_dispatch.db import Base
from sms_dispatch.exceptions import DeliveryError
from sms_dispatch.provider import Provider
from sms_dispatch.store import SqlAlchemyMessageStore


class RecordingProvider(Provider):
    """Keeps every batch it was asked to send."""

    def __init__(self) -> None:
        super().__init__()
        self.sent: list[tuple[list[str], str]] = []

    def send(self) -> None:
        self.sent.append((list(self.numbers), self.message))


class FailingProvider(Provider):
    def send(self) -> None:
        raise DeliveryError("gateway down")


@pytest.fixture
def session_factory() -> sessionmaker[Session]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db: Session) -> SqlAlchemyMessageStore:
    return SqlAlchemyMessageStore(db)


@pytest.fixture
def provider() -> RecordingProvider:
    return RecordingProvider()
