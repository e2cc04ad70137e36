"""
Shared fixtures.

Every crm_backend module that imported `db` is pointed at a fresh in-memory
mongomock-motor database per test, so route tests run the real app through
TestClient without a MongoDB server.
"""

import os
import sys
import uuid
import asyncio

import pytest

os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")

from fastapi.testclient import TestClient  # noqa: E402
from mongomock_motor import AsyncMongoMockClient  # noqa: E402
from werkzeug.security import generate_password_hash  # noqa: E402

from crm_backend.server import app  # noqa: E402
from crm_backend.config import create_access_token, now_iso  # noqa: E402

TEST_PASSWORD = "Secret123"


def run(coro):
    """Drive a single mongomock-motor call from sync test code"""
    return asyncio.run(coro)


def auth_headers(user: dict) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def test_db(monkeypatch):
    database = AsyncMongoMockClient()[f"crm_test_{uuid.uuid4().hex[:8]}"]
    for name, module in list(sys.modules.items()):
        if name.startswith("crm_backend") and hasattr(module, "db"):
            monkeypatch.setattr(module, "db", database)
    return database


@pytest.fixture
def client(test_db):
    return TestClient(app)


@pytest.fixture
def make_user(test_db):
    """Inserts a user straight into the store (admins cannot self-register)"""
    def _make(role="agent", email=None, password=TEST_PASSWORD, first="Test", last="User"):
        user = {
            "id": str(uuid.uuid4()),
            "firstName": first,
            "lastName": last,
            "name": f"{first} {last}",
            "email": email or f"{role}_{uuid.uuid4().hex[:6]}@test.local",
            "password": generate_password_hash(password, method="pbkdf2:sha256:1000"),
            "role": role,
            "phoneNumber": None,
            "status": "active",
            "createdAt": now_iso(),
        }
        run(test_db.users.insert_one(user))
        user.pop("_id", None)
        user.pop("password", None)
        return user
    return _make


@pytest.fixture
def admin(make_user):
    return make_user("admin", "admin@test.local", first="Ada", last="Admin")


@pytest.fixture
def manager(make_user):
    return make_user("manager", "manager@test.local", first="Max", last="Manager")


@pytest.fixture
def agent(make_user):
    return make_user("agent", "agent1@test.local", first="Alex", last="Agent")


@pytest.fixture
def other_agent(make_user):
    return make_user("agent", "agent2@test.local", first="Bo", last="Agent")


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def manager_headers(manager):
    return auth_headers(manager)


@pytest.fixture
def agent_headers(agent):
    return auth_headers(agent)


@pytest.fixture
def other_agent_headers(other_agent):
    return auth_headers(other_agent)
