import os

# Must be set before the settings object is created
os.environ.setdefault("JWT_SECRET", "test-secret-key-with-enough-length-123")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import mongomock
import pytest
from fastapi.testclient import TestClient

from notiq.infrastructure.db import mongo
from notiq.main import app


@pytest.fixture
def db(monkeypatch):
    """In-memory Mongo database wired into every repository."""
    database = mongomock.MongoClient()["notiq_test"]
    monkeypatch.setattr(mongo, "_db", database)
    return database


@pytest.fixture
def client(db):
    # Not used as a context manager: the lifespan (real Mongo connection) never runs
    return TestClient(app)


@pytest.fixture
def register(client):
    """Sign up + log in a user, return its Authorization header."""
    def _register(email="ana@example.com", password="secret123"):
        r = client.post("/api/auth/signup", json={"email": email, "password": password})
        assert r.status_code == 201, r.text
        r = client.post("/api/auth/login", json={"email": email, "password": password})
        assert r.status_code == 200, r.text
        return {"Authorization": f"Bearer {r.json()['token']}"}
    return _register


@pytest.fixture
def make_note(client):
    def _make_note(headers, title="Note", content="Body", **fields):
        r = client.post("/api/notes", json={"title": title, "content": content, **fields}, headers=headers)
        assert r.status_code == 201, r.text
        return r.json()
    return _make_note
