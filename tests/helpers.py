# tests/helpers.py

from __future__ import annotations

from fastapi.testclient import TestClient


def register(client: TestClient, username: str, email: str = None, password: str = "secret123") -> dict:
    email = email or f"{username}@example.com"
    r = client.post(
        "/api/v1/auth/register",
        json={"username": username, "email": email, "password": password},
    )
    assert r.status_code == 201, r.text
    return r.json()["data"]


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
