# tests/conftest.py
"""
Fixtures and test setup for the Pytest suite.
"""

import os

import pytest

# Set test environment variables BEFORE any application code is imported.
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["ENV"] = "test"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["BILLING_WEBHOOK_SECRET"] = "whsec_test"
os.environ["RECOMMENDATIONS_INLINE"] = "true"

from wellcoach.boot import build_services
from wellcoach.infrastructure.db.repository import EventRepository, UserRepository
from wellcoach.infrastructure.db.uow import create_tables, drop_tables, session_scope


@pytest.fixture(scope="session", autouse=True)
def _remove_test_db():
    yield
    if os.path.exists("./test.db"):
        os.remove("./test.db")


@pytest.fixture(scope="function")
def db():
    """A freshly created schema for each test."""
    drop_tables()
    create_tables()
    yield
    drop_tables()


@pytest.fixture(scope="function")
def services(db):
    return build_services()


@pytest.fixture
def make_user(db):
    def _make(user_id: str = "user-1", **fields):
        with session_scope() as session:
            repo = UserRepository(session)
            user = repo.find_or_create(user_id)
            if fields:
                repo.update(user, **fields)
            return user
    return _make


@pytest.fixture
def add_event(db):
    """Stores a module event directly, bypassing the rule engine."""
    def _add(module, user_id: str, **fields):
        with session_scope() as session:
            return EventRepository(session).add(module, user_id, **fields)
    return _add
