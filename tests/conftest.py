"""
Shared fixtures.

Settings are read from the environment at import time, so the signing
secret and a cheap bcrypt cost are set here before the application is
imported.  Each test gets its own SQLite file.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient

from finance_ledger_api.app.core.config import settings
from finance_ledger_api.app.main import app


@pytest.fixture
def database(tmp_path, monkeypatch):
    """Point the store at a fresh database file."""
    path = tmp_path / "ledger.db"
    monkeypatch.setattr(settings, "database_url", str(path))
    return path


@pytest.fixture
def client(database):
    """Test client with startup (migrations) applied."""
    with TestClient(app) as test_client:
        yield test_client


def signup(client, username="alice", password="hunter2", email=None):
    response = client.post(
        "/api/v1/users/",
        json={"username": username, "password": password, "email": email or f"{username}@example.com"},
    )
    assert response.status_code == 200, response.text
    return response.json()


def login(client, username="alice", password="hunter2"):
    return client.post("/api/v1/login", json={"username": username, "password": password})


@pytest.fixture
def user(client):
    """A signed-up user."""
    return signup(client)


@pytest.fixture
def auth_headers(client, user):
    """Authorization header for ``user``."""
    response = login(client)
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
