"""Configuration package for CyberGuard."""

from cyberguard.config.app_config import (
    AppConfig,
    AuthConfig,
    ConfigError,
    LoggingConfig,
    ServerConfig,
    StorageConfig,
    clear_config_cache,
    load_app_config,
)
from cyberguard.config.portal_content import (
    clear_content_cache,
    get_section,
    load_portal_content,
)

__all__ = [
    "AppConfig",
    "AuthConfig",
    "ConfigError",
    "LoggingConfig",
    "ServerConfig",
    "StorageConfig",
    "clear_config_cache",
    "load_app_config",
    "clear_content_cache",
    "get_section",
    "load_portal_content",
]
