"""Fixtures for storage tests (F2).

Every contract test runs against both backends.
"""

import pytest

from cyberguard.db import MemStorage, SqliteStorage


@pytest.fixture(params=["memory", "sqlite"])
def storage(request, tmp_path):
    """Fresh storage; SQLite lives in a temp directory."""
    if request.param == "sqlite":
        return SqliteStorage(tmp_path / "db" / "test.db")
    return MemStorage()


@pytest.fixture
def user(storage):
    return storage.create_user(username="alice", password="$2b$04$hash", email="alice@example.com")


@pytest.fixture
def module(storage):
    return storage.create_module(
        title="Password Security",
        description="Best practices for passwords",
        duration="15 min",
        level="beginner",
        category="General Security",
    )
