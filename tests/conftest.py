# File: tests/conftest.py

import pytest
from fastapi.testclient import TestClient

from user_api.core.config import Settings
from user_api.main import create_application


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'users.db'}"


@pytest.fixture
def settings(database_url):
    return Settings(database_url=database_url, backend_cors_origins=[], debug=False)


@pytest.fixture
def client(settings):
    # Entering the client runs the lifespan, which creates the tables
    with TestClient(create_application(settings)) as c:
        yield c


@pytest.fixture
def make_user(client):
    def _make(name="Alice Example", email="alice@example.com"):
        resp = client.post("/api/users", json={"name": name, "email": email})
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


@pytest.fixture
def total_users(client):
    def _total() -> int:
        return client.get("/api/users").json()["totalUsers"]

    return _total
