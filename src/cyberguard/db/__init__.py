"""Storage layer for the portal schema.

Provides:
- Storage: CRUD interface over users, modules, progress, assessments,
  attempts, resources, security events and activity logs
- MemStorage: in-memory backend
- SqliteStorage: SQLite backend
- create_storage(): pick a backend from StorageConfig
"""

from pathlib import Path

from cyberguard.config.app_config import StorageConfig
from cyberguard.db.database import get_db, init_db
from cyberguard.db.sqlite_storage import SqliteStorage
from cyberguard.db.storage import (
    DuplicateUsernameError,
    ForeignKeyError,
    MemStorage,
    NotFoundError,
    RecordValidationError,
    Storage,
    StorageError,
)


def create_storage(config: StorageConfig) -> Storage:
    """Build the storage backend named in config."""
    if config.backend == "sqlite":
        return SqliteStorage(Path(config.db_path))
    return MemStorage()


__all__ = [
    "DuplicateUsernameError",
    "ForeignKeyError",
    "MemStorage",
    "NotFoundError",
    "RecordValidationError",
    "SqliteStorage",
    "Storage",
    "StorageError",
    "create_storage",
    "get_db",
    "init_db",
]
