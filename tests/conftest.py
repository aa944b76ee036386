import os

# Must be set before anything under app/ is imported.
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from app.main import create_app

ALICE = {
    "name": "Alice",
    "email": "a@x.com",
    "password": "secret1",
    "phone": "111",
    "role": "customer",
}

BOOKING = {
    "customer_name": "Alice",
    "service": "Plumber",
    "provider": "Bob",
    "booking_date": "2026-01-01",
    "booking_time": "10:00",
    "address": "1 Rd",
}


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
def client(database_url):
    app = create_app(database_url=database_url)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def register(client):
    def _register(**overrides):
        body = {**ALICE, **overrides}
        return client.post("/register", json=body)

    return _register


@pytest.fixture
def login(client, register):
    """Register (if needed) and log in; returns the /login response body."""

    def _login(**overrides):
        body = {**ALICE, **overrides}
        register(**body)
        resp = client.post("/login", json={"email": body["email"], "password": body["password"]})
        assert resp.status_code == 200, resp.text
        return resp.json()

    return _login


@pytest.fixture
def auth_headers(login):
    def _headers(**overrides):
        token = login(**overrides)["token"]
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def alice_headers(auth_headers):
    return auth_headers()


@pytest.fixture
def booking_payload():
    return dict(BOOKING)
