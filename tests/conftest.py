# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from taskboard.config import Settings
from taskboard.main import create_app

from .helpers import auth_header, register

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-secret"


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Settings con una base SQLite temporal por test y una cuenta admin inicial."""
    return Settings(
        jwt_secret="test-secret",
        database_url=f"sqlite:///{tmp_path / 'taskboard.sqlite3'}",
        jwt_expires_minutes=30,
        log_level="WARNING",
        admin_username="root",
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
    )


@pytest.fixture()
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture()
def client(app):
    # el context manager dispara startup (create_all + admin)
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def db(app, client):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def alice(client) -> dict:
    data = register(client, "alice")
    return {"user": data["user"], "headers": auth_header(data["token"])}


@pytest.fixture()
def bob(client) -> dict:
    data = register(client, "bob")
    return {"user": data["user"], "headers": auth_header(data["token"])}


@pytest.fixture()
def admin(client) -> dict:
    r = client.post("/api/v1/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    return {"user": data["user"], "headers": auth_header(data["token"])}
