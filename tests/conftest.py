"""Shared fixtures: a throwaway SQLite database and a TestClient."""

import os
import tempfile

# Setup environment for testing, before anything imports the settings
_DATA_DIR = tempfile.mkdtemp()
os.environ["PAIRDIARY_DATA_DIR"] = _DATA_DIR
os.environ["PAIRDIARY_DB_PATH"] = os.path.join(_DATA_DIR, "test.db")
os.environ["PAIRDIARY_BCRYPT_ROUNDS"] = "4"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

from pairdiary.database import engine  # noqa: E402
from pairdiary.main import app  # noqa: E402
from pairdiary.services import identity_service  # noqa: E402

PASSWORD = "password123"


@pytest.fixture(autouse=True)
def fresh_db():
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    yield


@pytest.fixture
def session():
    with Session(engine) as s:
        yield s


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(session):
    def _make(username: str):
        return identity_service.register(username, PASSWORD, session)

    return _make


@pytest.fixture
def alice(make_user):
    return make_user("alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob")


@pytest.fixture
def carol(make_user):
    return make_user("carol")


def register(client, username: str, password: str = PASSWORD) -> dict:
    r = client.post("/api/auth/register", json={"username": username, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["data"]


def login(client, username: str, password: str = PASSWORD) -> dict:
    """Log in and return headers carrying the session token."""
    r = client.post("/api/auth/login", json={"username": username, "password": password})
    assert r.status_code == 200, r.text
    client.cookies.clear()
    return {"X-Session-ID": r.json()["data"]["session_id"]}
