import os
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session

# Keep the import-time engine off the on-disk app.db.
os.environ.setdefault("DATABASE_URL", "sqlite://")

from requalify import models  # noqa: E402
from requalify.database import build_engine, create_db_and_tables, get_session  # noqa: E402
from requalify.main import app  # noqa: E402
from requalify.services import PWD_CTX  # noqa: E402


@pytest.fixture
def engine():
    """A fresh in-memory SQLite database per test."""
    eng = build_engine("sqlite://", poolclass=StaticPool)
    create_db_and_tables(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture
def client(engine):
    """TestClient whose requests each get a session on the test database."""
    def _override():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = _override
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def seed_user(session):
    """Insert a user directly and return it."""
    def _seed(email: str = "test@test.com", **overrides) -> models.User:
        fields = dict(
            name="Test User",
            email=email,
            password_hash=PWD_CTX.hash("123456"),
            phone="11999999999",
            birth_date=date(1990, 1, 1),
            current_role="Developer",
            interest_area="Backend",
        )
        fields.update(overrides)
        user = models.User(**fields)
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
    return _seed


@pytest.fixture
def user_payload():
    """Factory for a valid user creation JSON body."""
    def _payload(**overrides) -> dict:
        payload = {
            "name": "Ana Souza",
            "email": "ana@example.com",
            "password": "s3cret",
            "phone": "11988887777",
            "birth_date": "1992-05-17",
            "current_role": "Support Analyst",
            "interest_area": "Infrastructure",
        }
        payload.update(overrides)
        return payload
    return _payload
