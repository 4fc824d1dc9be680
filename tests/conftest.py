import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import create_app


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        bcrypt_salt_rounds=4,
        jwt_secret="test-secret",
        upload_dir=tmp_path / "uploads",
        frontend_url="http://localhost:5173",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def register(client):
    def _register(username="alice", password="s3cret-pw"):
        return client.post("/register", json={"username": username, "password": password})
    return _register


@pytest.fixture
def logged_in(client, register):
    """Client holding a session cookie for user "alice"."""
    register("alice", "s3cret-pw")
    resp = client.post("/login", json={"username": "alice", "password": "s3cret-pw"})
    assert resp.status_code == 200
    return client
