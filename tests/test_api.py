from __future__ import annotations

from collections.abc import Generator

import pytest
from conftest import FailingProvider, RecordingProvider
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from sms_dispatch.config import Settings, get_settings
from sms_dispatch.main import app, get_db, get_provider


def _client(
    session_factory: sessionmaker[Session],
    settings: Settings,
    provider: object | None = None,
) -> TestClient:
    def _get_db() -> Generator[Session, None, None]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_settings] = lambda: settings
    if provider is not None:
        app.dependency_overrides[get_provider] = lambda: provider
    return TestClient(app)


@pytest.fixture(autouse=True)
def _reset_overrides():
    yield
    app.dependency_overrides.clear()


def test_send_records_without_delivery_outside_production(
    session_factory: sessionmaker[Session], provider: RecordingProvider
) -> None:
    client = _client(session_factory, Settings(app_env="local"), provider)

    resp = client.post(
        "/sms/send",
        json={"numbers": ["9045344321", "+7 904-534-23-14"], "message": "Hello"},
    )

    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert len(data["record_ids"]) == 2
    assert data["sent"] is False
    assert provider.sent == []


def test_send_in_production_clamps_and_delivers(
    session_factory: sessionmaker[Session], provider: RecordingProvider
) -> None:
    settings = Settings(app_env="production", max_sms_chars=10)
    client = _client(session_factory, settings, provider)

    resp = client.post("/sms/send", json={"numbers": ["9045344321"], "message": "A long message"})

    assert resp.status_code == 200
    assert resp.json()["sent"] is True
    assert provider.sent == [(["9045344321"], "A long...")]


def test_send_invalid_number_is_422(
    session_factory: sessionmaker[Session], provider: RecordingProvider
) -> None:
    client = _client(session_factory, Settings(app_env="local"), provider)

    resp = client.post("/sms/send", json={"numbers": ["12345"], "message": "Hi"})

    assert resp.status_code == 422
    assert "12345" in resp.json()["detail"]


def test_send_empty_numbers_is_rejected(
    session_factory: sessionmaker[Session], provider: RecordingProvider
) -> None:
    client = _client(session_factory, Settings(app_env="local"), provider)
    resp = client.post("/sms/send", json={"numbers": [], "message": "Hi"})
    assert resp.status_code == 422


def test_send_delivery_failure_is_502(session_factory: sessionmaker[Session]) -> None:
    client = _client(session_factory, Settings(app_env="production"), FailingProvider())

    resp = client.post("/sms/send", json={"numbers": ["9045344321"], "message": "Hi"})

    assert resp.status_code == 502


def test_send_without_credentials_in_production_is_500(
    session_factory: sessionmaker[Session],
) -> None:
    settings = Settings(app_env="production", sms_login=None, sms_password=None, sms_sign=None)
    client = _client(session_factory, settings)

    resp = client.post("/sms/send", json={"numbers": ["9045344321"], "message": "Hi"})

    assert resp.status_code == 500


def test_admin_messages_requires_token(
    session_factory: sessionmaker[Session], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("sms_dispatch.main.ALLOWED_ADMIN_IPS", {"testclient"})
    client = _client(session_factory, Settings(admin_token="s3cret"))

    assert client.get("/admin/messages").status_code == 401
    assert (
        client.get("/admin/messages", headers={"X-Admin-Token": "wrong"}).status_code == 401
    )


def test_admin_messages_rejects_remote_hosts(session_factory: sessionmaker[Session]) -> None:
    client = _client(session_factory, Settings(admin_token="s3cret"))
    resp = client.get("/admin/messages", headers={"X-Admin-Token": "s3cret"})
    assert resp.status_code == 403


def test_admin_messages_lists_recent(
    session_factory: sessionmaker[Session],
    provider: RecordingProvider,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr("sms_dispatch.main.ALLOWED_ADMIN_IPS", {"testclient"})
    client = _client(session_factory, Settings(app_env="local", admin_token="s3cret"), provider)
    client.post("/sms/send", json={"numbers": ["9045344321"], "message": "first"})
    client.post("/sms/send", json={"numbers": ["79045342314"], "message": "second"})

    resp = client.get("/admin/messages?limit=1", headers={"X-Admin-Token": "s3cret"})

    assert resp.status_code == 200
    [record] = resp.json()
    assert record["number"] == "79045342314"
    assert record["message"] == "second"
    assert record["is_real_send"] is False
