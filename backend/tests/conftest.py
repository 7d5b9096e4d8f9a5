import pytest
from fastapi.testclient import TestClient

from notetaker.main import create_app


@pytest.fixture()
def app(tmp_path, monkeypatch):
    # isolate data dir per test
    monkeypatch.setenv("APP_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("JWT_SECRET", "dev-secret-for-tests")
    monkeypatch.setenv("JWT_EXP_MINUTES", "15")
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    monkeypatch.setenv("NOTETAKER_ALLOW_HEADER_IDENTITY", "true")
    return create_app()


@pytest.fixture()
def client(app):
    return TestClient(app)


def as_user(user_id):
    return {"X-User-Id": user_id}


def create_note(client, user_id, title="t1", content="c1"):
    r = client.post("/notes", headers=as_user(user_id), json={"title": title, "content": content})
    assert r.status_code == 201, r.text
    return r.json()
