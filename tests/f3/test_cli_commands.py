"""Tests for the cyberguard CLI (F3)."""

from typer.testing import CliRunner

from cyberguard.cli.commands import app
from cyberguard.config import app_config
from cyberguard.db import SqliteStorage

runner = CliRunner()


class TestInitDb:
    def test_creates_database(self, tmp_path):
        db_path = tmp_path / "db" / "portal.db"
        result = runner.invoke(app, ["init-db", "--db-path", str(db_path)])
        assert result.exit_code == 0
        assert "Database ready" in result.output
        assert db_path.exists()


class TestSeed:
    def test_seed_then_noop(self, tmp_path):
        db_path = tmp_path / "portal.db"
        first = runner.invoke(app, ["seed", "--db-path", str(db_path)])
        assert first.exit_code == 0
        assert "Catalog seeded" in first.output
        assert len(SqliteStorage(db_path).get_modules()) == 5

        second = runner.invoke(app, ["seed", "--db-path", str(db_path)])
        assert second.exit_code == 0
        assert "already present" in second.output


class TestCreateUser:
    def test_create_user(self, tmp_path):
        db_path = tmp_path / "portal.db"
        result = runner.invoke(
            app,
            [
                "create-user", "carol",
                "--password", "password123",
                "--email", "carol@example.com",
                "--role", "admin",
                "--db-path", str(db_path),
            ],
        )
        assert result.exit_code == 0, result.output
        user = SqliteStorage(db_path).get_user_by_username("carol")
        assert user.role == "admin"
        assert user.password.startswith("$2")

    def test_duplicate_user(self, tmp_path):
        db_path = tmp_path / "portal.db"
        args = ["create-user", "carol", "--password", "password123", "--db-path", str(db_path)]
        runner.invoke(app, args)
        result = runner.invoke(app, args)
        assert result.exit_code == 1
        assert "Username already exists" in result.output

    def test_invalid_email(self, tmp_path):
        result = runner.invoke(
            app,
            ["create-user", "carol", "--password", "pw", "--email", "bad", "--db-path", str(tmp_path / "x.db")],
        )
        assert result.exit_code == 1
        assert not (tmp_path / "x.db").exists()

    def test_bad_config_exits_cleanly(self, tmp_path, monkeypatch):
        config_file = tmp_path / "app_config_v1.yaml"
        config_file.write_text("storage:\n  backend: postgres\n")
        monkeypatch.setattr(app_config, "CONFIG_FILE", config_file)
        db_path = tmp_path / "portal.db"

        result = runner.invoke(
            app,
            ["create-user", "carol", "--password", "password123", "--db-path", str(db_path)],
        )
        assert result.exit_code == 1
        assert "storage.backend" in result.output
        assert not db_path.exists()
