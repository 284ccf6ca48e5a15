"""SQLite-backed storage.

Same contract as MemStorage. Each operation opens its own connection via
get_db(); constraint violations surface as StorageError subclasses.
"""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Any

import structlog

from cyberguard.core.models import (
    DEFAULT_PASSING_SCORE,
    DEFAULT_ROLE,
    MODULE_LEVELS,
    RESOURCE_TYPES,
    SEVERITIES,
    ActivityLog,
    Assessment,
    AssessmentAttempt,
    Module,
    ModuleProgress,
    Resource,
    SecurityEvent,
    User,
    default_notification_settings,
    utc_now,
)
from cyberguard.db.database import get_db, init_db
from cyberguard.db.storage import (
    DuplicateUsernameError,
    ForeignKeyError,
    NotFoundError,
    RecordValidationError,
    Storage,
    attempt_outcome,
    check_choice,
    check_score,
    check_user_fields,
    progress_fields,
    require_text,
)

logger = structlog.get_logger(__name__)

_JSON_USER_FIELDS = ("notification_settings",)


def _dumps(value: Any) -> str | None:
    return None if value is None else json.dumps(value)


def _loads(value: str | None, default: Any = None) -> Any:
    return default if value is None else json.loads(value)


def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        id=row["id"],
        username=row["username"],
        password=row["password"],
        email=row["email"],
        role=row["role"] or DEFAULT_ROLE,
        company=row["company"],
        phone=row["phone"],
        bio=row["bio"],
        notification_settings=_loads(
            row["notification_settings"], default_notification_settings()
        ),
        created_at=row["created_at"],
        last_login=row["last_login"],
    )


def _row_to_module(row: sqlite3.Row) -> Module:
    return Module(**dict(row))


def _row_to_progress(row: sqlite3.Row) -> ModuleProgress:
    return ModuleProgress(**dict(row))


def _row_to_assessment(row: sqlite3.Row) -> Assessment:
    data = dict(row)
    data["questions"] = _loads(data["questions"], [])
    return Assessment(**data)


def _row_to_attempt(row: sqlite3.Row) -> AssessmentAttempt:
    data = dict(row)
    data["answers"] = _loads(data["answers"])
    data["passed"] = None if data["passed"] is None else bool(data["passed"])
    return AssessmentAttempt(**data)


def _row_to_event(row: sqlite3.Row) -> SecurityEvent:
    data = dict(row)
    for key in ("recommendations", "industries", "tags"):
        data[key] = _loads(data[key], [])
    return SecurityEvent(**data)


def _row_to_resource(row: sqlite3.Row) -> Resource:
    data = dict(row)
    data["popular"] = bool(data["popular"])
    return Resource(**data)


def _row_to_activity(row: sqlite3.Row) -> ActivityLog:
    data = dict(row)
    data["details"] = _loads(data["details"])
    return ActivityLog(**data)


class SqliteStorage(Storage):
    """Storage persisted to a SQLite file."""

    def __init__(self, db_path: Path | str) -> None:
        self.db_path = Path(db_path)
        init_db(self.db_path)

    def _connect(self):
        return get_db(self.db_path)

    @staticmethod
    def _exists(conn: sqlite3.Connection, table: str, record_id: int) -> bool:
        row = conn.execute(f"SELECT 1 FROM {table} WHERE id = ?", (record_id,)).fetchone()
        return row is not None

    def _fetch_one(self, sql: str, params: tuple, converter):
        with self._connect() as conn:
            row = conn.execute(sql, params).fetchone()
        return None if row is None else converter(row)

    def _fetch_all(self, sql: str, params: tuple, converter) -> list:
        with self._connect() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [converter(row) for row in rows]

    # Users

    def get_user(self, user_id: int) -> User | None:
        return self._fetch_one("SELECT * FROM users WHERE id = ?", (user_id,), _row_to_user)

    def get_user_by_username(self, username: str) -> User | None:
        return self._fetch_one(
            "SELECT * FROM users WHERE username = ?", (username,), _row_to_user
        )

    def create_user(
        self,
        username: str,
        password: str,
        email: str | None = None,
        role: str = DEFAULT_ROLE,
    ) -> User:
        require_text(username, "username")
        require_text(password, "password")

        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO users (
                        username, password, email, role, notification_settings, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        username,
                        password,
                        email,
                        role or DEFAULT_ROLE,
                        json.dumps(default_notification_settings()),
                        utc_now(),
                    ),
                )
                user_id = cursor.lastrowid
        except sqlite3.IntegrityError as e:
            if "UNIQUE" in str(e):
                raise DuplicateUsernameError(username) from e
            raise

        logger.debug("users.inserted", user_id=user_id)
        return self.get_user(user_id)

    def update_user(self, user_id: int, **fields: Any) -> User:
        check_user_fields(fields)
        if not fields:
            user = self.get_user(user_id)
            if user is None:
                raise NotFoundError("users", user_id)
            return user

        values = {
            key: json.dumps(value) if key in _JSON_USER_FIELDS else value
            for key, value in fields.items()
        }
        # Column names come from USER_UPDATABLE_FIELDS, never from callers
        assignments = ", ".join(f"{key} = ?" for key in values)

        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    f"UPDATE users SET {assignments} WHERE id = ?",
                    (*values.values(), user_id),
                )
                if cursor.rowcount == 0:
                    raise NotFoundError("users", user_id)
        except sqlite3.IntegrityError as e:
            if "UNIQUE" in str(e):
                raise DuplicateUsernameError(fields["username"]) from e
            raise

        return self.get_user(user_id)

    def list_users(self) -> list[User]:
        return self._fetch_all("SELECT * FROM users ORDER BY id", (), _row_to_user)

    # Modules

    def get_modules(self) -> list[Module]:
        return self._fetch_all("SELECT * FROM modules ORDER BY id", (), _row_to_module)

    def get_module_by_id(self, module_id: int) -> Module | None:
        return self._fetch_one(
            "SELECT * FROM modules WHERE id = ?", (module_id,), _row_to_module
        )

    def create_module(
        self,
        title: str,
        description: str,
        duration: str,
        level: str,
        category: str,
        content: str | None = None,
    ) -> Module:
        require_text(title, "title")
        require_text(description, "description")
        require_text(duration, "duration")
        require_text(category, "category")
        check_choice(level, MODULE_LEVELS, "level")
        now = utc_now()

        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO modules (
                    title, description, content, duration, level, category,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (title, description, content, duration, level, category, now, now),
            )
            module_id = cursor.lastrowid

        return self.get_module_by_id(module_id)

    # Module progress

    def get_module_progress(self, user_id: int) -> list[ModuleProgress]:
        return self._fetch_all(
            "SELECT * FROM module_progress WHERE user_id = ? ORDER BY id",
            (user_id,),
            _row_to_progress,
        )

    def upsert_module_progress(
        self, user_id: int, module_id: int, status: str, progress: int = 0
    ) -> ModuleProgress:
        progress, completed_at = progress_fields(status, progress)

        with self._connect() as conn:
            if not self._exists(conn, "users", user_id):
                raise ForeignKeyError("user_id", user_id)
            if not self._exists(conn, "modules", module_id):
                raise ForeignKeyError("module_id", module_id)
            conn.execute(
                """
                INSERT INTO module_progress (
                    user_id, module_id, status, progress, completed_at, last_activity
                ) VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(user_id, module_id) DO UPDATE SET
                    status = excluded.status,
                    progress = excluded.progress,
                    completed_at = excluded.completed_at,
                    last_activity = excluded.last_activity
                """,
                (user_id, module_id, status, progress, completed_at, utc_now()),
            )
            row = conn.execute(
                "SELECT * FROM module_progress WHERE user_id = ? AND module_id = ?",
                (user_id, module_id),
            ).fetchone()

        return _row_to_progress(row)

    # Assessments

    def get_assessments(self) -> list[Assessment]:
        return self._fetch_all("SELECT * FROM assessments ORDER BY id", (), _row_to_assessment)

    def get_assessment_by_id(self, assessment_id: int) -> Assessment | None:
        return self._fetch_one(
            "SELECT * FROM assessments WHERE id = ?", (assessment_id,), _row_to_assessment
        )

    def create_assessment(
        self,
        title: str,
        description: str,
        questions: list[Any],
        module_id: int | None = None,
        time_limit: str | None = None,
        passing_score: int = DEFAULT_PASSING_SCORE,
    ) -> Assessment:
        require_text(title, "title")
        require_text(description, "description")
        check_score(passing_score, "passing_score")
        if questions is None:
            raise RecordValidationError("questions is required")
        now = utc_now()

        with self._connect() as conn:
            if module_id is not None and not self._exists(conn, "modules", module_id):
                raise ForeignKeyError("module_id", module_id)
            cursor = conn.execute(
                """
                INSERT INTO assessments (
                    title, description, module_id, time_limit, passing_score,
                    questions, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    title,
                    description,
                    module_id,
                    time_limit,
                    passing_score,
                    json.dumps(questions),
                    now,
                    now,
                ),
            )
            assessment_id = cursor.lastrowid

        return self.get_assessment_by_id(assessment_id)

    # Assessment attempts

    def create_assessment_attempt(
        self,
        user_id: int,
        assessment_id: int,
        score: int | None = None,
        answers: Any = None,
    ) -> AssessmentAttempt:
        with self._connect() as conn:
            if not self._exists(conn, "users", user_id):
                raise ForeignKeyError("user_id", user_id)
            row = conn.execute(
                "SELECT passing_score FROM assessments WHERE id = ?", (assessment_id,)
            ).fetchone()
            if row is None:
                raise ForeignKeyError("assessment_id", assessment_id)
            passed, completed_at = attempt_outcome(score, row["passing_score"])

            cursor = conn.execute(
                """
                INSERT INTO assessment_attempts (
                    user_id, assessment_id, score, passed, answers, started_at, completed_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    user_id,
                    assessment_id,
                    score,
                    None if passed is None else int(passed),
                    _dumps(answers),
                    utc_now(),
                    completed_at,
                ),
            )
            attempt_id = cursor.lastrowid

        return self._fetch_one(
            "SELECT * FROM assessment_attempts WHERE id = ?", (attempt_id,), _row_to_attempt
        )

    def get_assessment_attempts(self, user_id: int) -> list[AssessmentAttempt]:
        return self._fetch_all(
            "SELECT * FROM assessment_attempts WHERE user_id = ? ORDER BY id",
            (user_id,),
            _row_to_attempt,
        )

    # Resources

    def get_resources(self) -> list[Resource]:
        return self._fetch_all("SELECT * FROM resources ORDER BY id", (), _row_to_resource)

    def get_resource_by_id(self, resource_id: int) -> Resource | None:
        return self._fetch_one(
            "SELECT * FROM resources WHERE id = ?", (resource_id,), _row_to_resource
        )

    def create_resource(
        self,
        title: str,
        description: str,
        type: str,
        category: str,
        url: str,
        file_size: str | None = None,
        duration: str | None = None,
        popular: bool = False,
    ) -> Resource:
        require_text(title, "title")
        require_text(description, "description")
        require_text(category, "category")
        require_text(url, "url")
        check_choice(type, RESOURCE_TYPES, "type")
        now = utc_now()

        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO resources (
                    title, description, type, category, url, file_size, duration,
                    popular, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    title,
                    description,
                    type,
                    category,
                    url,
                    file_size,
                    duration,
                    int(popular),
                    now,
                    now,
                ),
            )
            resource_id = cursor.lastrowid

        return self.get_resource_by_id(resource_id)

    # Security events

    def get_security_events(self) -> list[SecurityEvent]:
        return self._fetch_all("SELECT * FROM security_events ORDER BY id", (), _row_to_event)

    def create_security_event(
        self,
        title: str,
        description: str,
        category: str,
        severity: str,
        content: str | None = None,
        source: str | None = None,
        recommendations: list[str] | None = None,
        industries: list[str] | None = None,
        tags: list[str] | None = None,
    ) -> SecurityEvent:
        require_text(title, "title")
        require_text(description, "description")
        require_text(category, "category")
        check_choice(severity, SEVERITIES, "severity")

        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO security_events (
                    title, description, content, category, severity, source,
                    recommendations, industries, tags, published_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    title,
                    description,
                    content,
                    category,
                    severity,
                    source,
                    json.dumps(list(recommendations or [])),
                    json.dumps(list(industries or [])),
                    json.dumps(list(tags or [])),
                    utc_now(),
                ),
            )
            event_id = cursor.lastrowid

        return self._fetch_one(
            "SELECT * FROM security_events WHERE id = ?", (event_id,), _row_to_event
        )

    # Activity logs

    def create_activity_log(
        self,
        user_id: int,
        action: str,
        details: dict[str, Any] | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> ActivityLog:
        require_text(action, "action")

        with self._connect() as conn:
            if not self._exists(conn, "users", user_id):
                raise ForeignKeyError("user_id", user_id)
            cursor = conn.execute(
                """
                INSERT INTO activity_logs (
                    user_id, action, details, ip_address, user_agent, created_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (user_id, action, _dumps(details), ip_address, user_agent, utc_now()),
            )
            entry_id = cursor.lastrowid

        return self._fetch_one(
            "SELECT * FROM activity_logs WHERE id = ?", (entry_id,), _row_to_activity
        )

    def get_activity_logs(self, user_id: int, limit: int = 50) -> list[ActivityLog]:
        return self._fetch_all(
            "SELECT * FROM activity_logs WHERE user_id = ? ORDER BY id DESC LIMIT ?",
            (user_id, limit),
            _row_to_activity,
        )
