import os

# Must be set before tracker modules read their settings
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("METRICS_ENABLED", "false")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient

from tracker.core.config import settings
from tracker.main import create_app
from tracker.store.json_store import JsonStore


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "data" / "db.json"


@pytest.fixture
def store(data_file):
    return JsonStore(data_file)


@pytest.fixture
def make_client(store):
    """Build a client for an app over the test store, with optional setting overrides."""
    def _make(**overrides):
        cfg = settings.model_copy(update=overrides)
        return TestClient(create_app(cfg, store=store))
    return _make


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def register(client):
    def _register(email="a@b.com", password="x", name=""):
        resp = client.post("/api/register", json={"name": name, "email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return resp.json()
    return _register
