"""Tests specific to the SQLite backend and schema (F2)."""

import sqlite3

import pytest

from cyberguard.config.app_config import StorageConfig
from cyberguard.db import MemStorage, SqliteStorage, create_storage, get_db, init_db


class TestInitDb:
    def test_creates_file_and_tables(self, tmp_path):
        path = init_db(tmp_path / "nested" / "portal.db")
        assert path.exists()
        with get_db(path) as conn:
            tables = {
                row["name"]
                for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
            }
        assert {
            "users",
            "modules",
            "module_progress",
            "assessments",
            "assessment_attempts",
            "security_events",
            "resources",
            "activity_logs",
        } <= tables

    def test_idempotent(self, tmp_path):
        path = tmp_path / "portal.db"
        init_db(path)
        init_db(path)

    def test_check_constraint_enforced(self, tmp_path):
        path = init_db(tmp_path / "portal.db")
        with pytest.raises(sqlite3.IntegrityError):
            with get_db(path) as conn:
                conn.execute(
                    "INSERT INTO resources (title, description, type, category, url, created_at, updated_at)"
                    " VALUES ('t', 'd', 'podcast', 'c', '/u', 'now', 'now')"
                )

    def test_rollback_on_error(self, tmp_path):
        path = init_db(tmp_path / "portal.db")
        with pytest.raises(RuntimeError):
            with get_db(path) as conn:
                conn.execute(
                    "INSERT INTO users (username, password, created_at) VALUES ('a', 'p', 'now')"
                )
                raise RuntimeError("boom")
        with get_db(path) as conn:
            assert conn.execute("SELECT COUNT(*) FROM users").fetchone()[0] == 0


class TestPersistence:
    def test_data_survives_new_instance(self, tmp_path):
        path = tmp_path / "portal.db"
        SqliteStorage(path).create_user(username="alice", password="x")
        assert SqliteStorage(path).get_user_by_username("alice") is not None


class TestCreateStorage:
    def test_memory_backend(self):
        assert isinstance(create_storage(StorageConfig(backend="memory")), MemStorage)

    def test_sqlite_backend(self, tmp_path):
        storage = create_storage(StorageConfig(backend="sqlite", db_path=str(tmp_path / "x.db")))
        assert isinstance(storage, SqliteStorage)
        assert (tmp_path / "x.db").exists()
