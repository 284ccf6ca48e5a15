"""SQLite database connection and schema management.

Provides connection management and schema initialization for the portal.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import structlog

logger = structlog.get_logger(__name__)

# Default database location
DEFAULT_DB_PATH = Path("db/cyberguard.db")


def init_db(db_path: Path | None = None) -> Path:
    """Initialize database with schema.

    Creates the database file and all required tables if they don't exist.

    Args:
        db_path: Path to database file. Defaults to db/cyberguard.db

    Returns:
        The path that was initialized.
    """
    path = db_path or DEFAULT_DB_PATH

    with get_db(path) as conn:
        _create_schema(conn)

    logger.info("database.initialized", path=str(path))
    return path


@contextmanager
def get_db(db_path: Path | None = None) -> Generator[sqlite3.Connection, None, None]:
    """Get database connection as context manager.

    Commits on success, rolls back on error.

    Yields:
        SQLite connection with row factory set to sqlite3.Row

    Example:
        with get_db(path) as conn:
            rows = conn.execute("SELECT * FROM modules").fetchall()
    """
    path = db_path or DEFAULT_DB_PATH

    # Ensure directory exists
    path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")

    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def _create_schema(conn: sqlite3.Connection) -> None:
    """Create database schema.

    Uses IF NOT EXISTS for idempotency. JSON columns are stored as TEXT.
    """
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT NOT NULL UNIQUE,
            password TEXT NOT NULL,
            email TEXT,
            role TEXT DEFAULT 'user',
            company TEXT,
            phone TEXT,
            bio TEXT,
            notification_settings TEXT NOT NULL DEFAULT '{}',
            created_at TEXT NOT NULL,
            last_login TEXT
        );

        CREATE TABLE IF NOT EXISTS modules (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            description TEXT NOT NULL,
            content TEXT,
            duration TEXT NOT NULL,
            level TEXT NOT NULL CHECK(level IN ('beginner', 'intermediate', 'advanced')),
            category TEXT NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );

        -- One progress row per (user, module)
        CREATE TABLE IF NOT EXISTS module_progress (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL REFERENCES users(id),
            module_id INTEGER NOT NULL REFERENCES modules(id),
            status TEXT NOT NULL CHECK(status IN ('not-started', 'in-progress', 'completed')),
            progress INTEGER DEFAULT 0 CHECK(progress BETWEEN 0 AND 100),
            completed_at TEXT,
            last_activity TEXT NOT NULL,
            UNIQUE(user_id, module_id)
        );

        CREATE TABLE IF NOT EXISTS assessments (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            description TEXT NOT NULL,
            module_id INTEGER REFERENCES modules(id),
            time_limit TEXT,
            passing_score INTEGER DEFAULT 70 CHECK(passing_score BETWEEN 0 AND 100),
            questions TEXT NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS assessment_attempts (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL REFERENCES users(id),
            assessment_id INTEGER NOT NULL REFERENCES assessments(id),
            score INTEGER CHECK(score IS NULL OR score BETWEEN 0 AND 100),
            passed INTEGER,
            answers TEXT,
            started_at TEXT NOT NULL,
            completed_at TEXT
        );

        CREATE TABLE IF NOT EXISTS security_events (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            description TEXT NOT NULL,
            content TEXT,
            category TEXT NOT NULL,
            severity TEXT NOT NULL CHECK(severity IN ('informational', 'low', 'medium', 'high', 'critical')),
            source TEXT,
            recommendations TEXT,
            industries TEXT,
            tags TEXT,
            published_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS resources (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            description TEXT NOT NULL,
            type TEXT NOT NULL CHECK(type IN ('document', 'video', 'template', 'link')),
            category TEXT NOT NULL,
            url TEXT NOT NULL,
            file_size TEXT,
            duration TEXT,
            popular INTEGER DEFAULT 0,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS activity_logs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL REFERENCES users(id),
            action TEXT NOT NULL,
            details TEXT,
            ip_address TEXT,
            user_agent TEXT,
            created_at TEXT NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_module_progress_user ON module_progress(user_id);
        CREATE INDEX IF NOT EXISTS idx_attempts_user ON assessment_attempts(user_id);
        CREATE INDEX IF NOT EXISTS idx_activity_user ON activity_logs(user_id);
        """
    )
