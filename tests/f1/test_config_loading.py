"""Tests for app configuration (F1).

Tests loading from YAML, defaults and validation of bad values.
"""

import pytest

from cyberguard.config import app_config
from cyberguard.config.app_config import (
    CONFIG_FILE,
    AppConfig,
    AuthConfig,
    ConfigError,
    StorageConfig,
    clear_config_cache,
    load_app_config,
)


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """Point CONFIG_FILE at a temp file and reset the cache around the test."""
    path = tmp_path / "app_config_v1.yaml"
    monkeypatch.setattr(app_config, "CONFIG_FILE", path)
    clear_config_cache()
    yield path
    clear_config_cache()


class TestLoadAppConfig:
    """Tests for load_app_config function."""

    def test_load_config_from_yaml(self):
        """Loads the bundled app_config_v1.yaml."""
        clear_config_cache()
        config = load_app_config()
        assert isinstance(config, AppConfig)
        assert config.storage.backend == "memory"
        assert config.auth.session_cookie == "cyberguard_session"

    def test_config_file_exists(self):
        assert CONFIG_FILE.exists(), f"Missing: {CONFIG_FILE}"

    def test_defaults_without_file(self, config_file):
        """Missing file falls back to built-in defaults."""
        config = load_app_config()
        assert config.environment == "development"
        assert config.server.port == 5000
        assert config.auth.bcrypt_rounds == 12
        assert config.storage == StorageConfig()
        assert config.logging.json_output is False

    def test_partial_override_keeps_other_keys(self, config_file):
        config_file.write_text("auth:\n  bcrypt_rounds: 4\nlogging:\n  json: true\n")
        config = load_app_config()
        assert config.auth.bcrypt_rounds == 4
        assert config.auth.session_max_age == 86400
        assert config.logging.json_output is True
        assert config.logging.level == "INFO"

    def test_unknown_section_ignored(self, config_file):
        config_file.write_text("paths:\n  portal_content: elsewhere.yaml\n")
        config = load_app_config()
        assert not hasattr(config, "paths")
        assert config.storage == StorageConfig()

    def test_cache_returns_same_object(self, config_file):
        assert load_app_config() is load_app_config()

    def test_force_reload_reads_file_again(self, config_file):
        first = load_app_config()
        config_file.write_text("environment: production\n")
        assert load_app_config() is first
        reloaded = load_app_config(force_reload=True)
        assert reloaded.environment == "production"
        assert reloaded.is_development is False


class TestConfigValidation:
    """Invalid values raise ConfigError."""

    def test_unknown_backend(self, config_file):
        config_file.write_text("storage:\n  backend: postgres\n")
        with pytest.raises(ConfigError, match="storage.backend"):
            load_app_config()

    @pytest.mark.parametrize("rounds", [3, 32])
    def test_bcrypt_rounds_out_of_range(self, config_file, rounds):
        config_file.write_text(f"auth:\n  bcrypt_rounds: {rounds}\n")
        with pytest.raises(ConfigError, match="bcrypt_rounds"):
            load_app_config()


class TestSessionSecret:
    """Tests for AuthConfig.get_session_secret."""

    def test_secret_from_environment(self, monkeypatch):
        monkeypatch.setenv("CYBERGUARD_SESSION_SECRET", "s3cret")
        assert AuthConfig().get_session_secret() == "s3cret"

    def test_generated_secret_when_unset(self, monkeypatch):
        monkeypatch.delenv("CYBERGUARD_SESSION_SECRET", raising=False)
        first = AuthConfig().get_session_secret()
        second = AuthConfig().get_session_secret()
        assert len(first) == 64
        assert first != second

    def test_no_env_var_configured(self):
        assert len(AuthConfig(session_secret_env=None).get_session_secret()) == 64
