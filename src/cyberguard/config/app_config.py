"""Application configuration loader.

Loads centralized configuration from data/config/app_config_v1.yaml,
falling back to built-in defaults when the file is missing.

Usage:
    from cyberguard.config.app_config import load_app_config

    config = load_app_config()
    secret = config.auth.get_session_secret()
"""

from __future__ import annotations

import os
import secrets
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("data/config/app_config_v1.yaml")

STORAGE_BACKENDS = ("memory", "sqlite")


@dataclass
class ServerConfig:
    """Settings for the ASGI server started by `cyberguard serve`."""

    host: str = "127.0.0.1"
    port: int = 5000
    cors_origins: list[str] = field(default_factory=lambda: ["*"])


@dataclass
class AuthConfig:
    """Session cookie and password hashing settings."""

    session_secret_env: str | None = "CYBERGUARD_SESSION_SECRET"
    session_cookie: str = "cyberguard_session"
    session_max_age: int = 86400
    https_only: bool = False
    bcrypt_rounds: int = 12

    def get_session_secret(self) -> str:
        """Get session signing secret from environment variable.

        Generates a random per-process secret when the variable is unset,
        which means sessions do not survive a restart.
        """
        if self.session_secret_env:
            value = os.environ.get(self.session_secret_env)
            if value:
                return value
        logger.warning(
            "session_secret_generated",
            env_var=self.session_secret_env,
        )
        return secrets.token_hex(32)


@dataclass
class StorageConfig:
    """Which storage backend to use and where SQLite keeps its file."""

    backend: str = "memory"
    db_path: str = "db/cyberguard.db"
    seed_on_startup: bool = True


@dataclass
class LoggingConfig:
    level: str = "INFO"
    json_output: bool = False


@dataclass
class AppConfig:
    """Application-wide configuration."""

    environment: str = "development"
    server: ServerConfig = field(default_factory=ServerConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


class ConfigError(Exception):
    """Raised when the configuration file holds an invalid value."""


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "environment": "development",
        "server": {
            "host": "127.0.0.1",
            "port": 5000,
            "cors_origins": ["*"],
        },
        "auth": {
            "session_secret_env": "CYBERGUARD_SESSION_SECRET",
            "session_cookie": "cyberguard_session",
            "session_max_age": 86400,
            "https_only": False,
            "bcrypt_rounds": 12,
        },
        "storage": {
            "backend": "memory",
            "db_path": "db/cyberguard.db",
            "seed_on_startup": True,
        },
        "logging": {
            "level": "INFO",
            "json": False,
        },
    }


def _merge(defaults: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Merge overrides into defaults one section deep."""
    result = dict(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = {**result[key], **value}
        else:
            result[key] = value
    return result


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    server_data = data.get("server", {})
    server = ServerConfig(
        host=server_data.get("host", "127.0.0.1"),
        port=int(server_data.get("port", 5000)),
        cors_origins=list(server_data.get("cors_origins", ["*"])),
    )

    auth_data = data.get("auth", {})
    auth = AuthConfig(
        session_secret_env=auth_data.get("session_secret_env"),
        session_cookie=auth_data.get("session_cookie", "cyberguard_session"),
        session_max_age=int(auth_data.get("session_max_age", 86400)),
        https_only=bool(auth_data.get("https_only", False)),
        bcrypt_rounds=int(auth_data.get("bcrypt_rounds", 12)),
    )
    if not 4 <= auth.bcrypt_rounds <= 31:
        raise ConfigError(f"auth.bcrypt_rounds must be between 4 and 31, got {auth.bcrypt_rounds}")

    storage_data = data.get("storage", {})
    storage = StorageConfig(
        backend=storage_data.get("backend", "memory"),
        db_path=storage_data.get("db_path", "db/cyberguard.db"),
        seed_on_startup=bool(storage_data.get("seed_on_startup", True)),
    )
    if storage.backend not in STORAGE_BACKENDS:
        raise ConfigError(
            f"storage.backend must be one of {', '.join(STORAGE_BACKENDS)}, got '{storage.backend}'"
        )

    logging_data = data.get("logging", {})
    logging_config = LoggingConfig(
        level=str(logging_data.get("level", "INFO")).upper(),
        json_output=bool(logging_data.get("json", False)),
    )

    return AppConfig(
        environment=data.get("environment", "development"),
        server=server,
        auth=auth,
        storage=storage,
        logging=logging_config,
    )


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config, falling back to defaults.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.

    Raises:
        ConfigError: If the file holds an unsupported value.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    data = _get_defaults()

    if CONFIG_FILE.exists():
        logger.debug("loading_app_config", source=str(CONFIG_FILE))
        file_data = yaml.safe_load(CONFIG_FILE.read_text(encoding="utf-8")) or {}
        data = _merge(data, file_data)
    else:
        logger.info("using_default_config")

    _cached_config = _parse_config(data)
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
