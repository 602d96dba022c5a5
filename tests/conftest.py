"""
Shared fixtures: a throwaway SQLite database, sessions, an API client and
helpers for registering users.
"""

import os
import uuid

# Must be set before anything imports taskline.database
os.environ["DATABASE_URL"] = "sqlite:///./test_taskline.db"

import pytest
from fastapi.testclient import TestClient

from taskline.main import app
from taskline.database import SessionLocal, Base, engine
from taskline.models.user import User


# Recreate all tables for each test
@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user(db):
    """Insert a user directly, for service-level tests."""
    def _make(email=None):
        user = User(email=email or f"user_{uuid.uuid4().hex[:8]}@example.com", name="tester")
        db.add(user)
        db.commit()
        return user.id
    return _make


@pytest.fixture
def login(client):
    """Register and log in a fresh user through the API; returns auth headers."""
    def _login(email=None, password="SecurePass123!"):
        email = email or f"user_{uuid.uuid4().hex[:8]}@example.com"
        r = client.post("/auth/register", json={"email": email, "password": password})
        assert r.status_code == 200, r.text
        r = client.post("/auth/login", json={"email": email, "password": password})
        assert r.status_code == 200, r.text
        return {"Authorization": f"Bearer {r.json()['token']}"}
    return _login
