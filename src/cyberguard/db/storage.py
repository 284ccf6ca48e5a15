"""Storage interface and the in-memory backend.

`Storage` lists every CRUD operation the portal needs over its relational
schema. `MemStorage` keeps records in per-table dicts; `SqliteStorage`
(cyberguard.db.sqlite_storage) persists them. Both enforce the same
invariants and raise the same errors.
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import Any, TypeVar

import structlog

from cyberguard.core.models import (
    DEFAULT_PASSING_SCORE,
    DEFAULT_ROLE,
    MODULE_LEVELS,
    PROGRESS_STATUSES,
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
    utc_now,
)
from cyberguard.utils.validators import validate_choice, validate_score

logger = structlog.get_logger(__name__)

T = TypeVar("T")

USER_UPDATABLE_FIELDS = frozenset(
    {
        "username",
        "password",
        "email",
        "role",
        "company",
        "phone",
        "bio",
        "notification_settings",
        "last_login",
    }
)


class StorageError(Exception):
    """Base error for storage operations."""


class NotFoundError(StorageError):
    """Raised when a record to update does not exist."""

    def __init__(self, table: str, record_id: int):
        self.table = table
        self.record_id = record_id
        super().__init__(f"{table} record {record_id} not found")


class DuplicateUsernameError(StorageError):
    """Raised when a username is already taken."""

    def __init__(self, username: str):
        self.username = username
        super().__init__("Username already exists")


class ForeignKeyError(StorageError):
    """Raised when a record references a row that does not exist."""

    def __init__(self, field_name: str, value: int):
        self.field_name = field_name
        self.value = value
        super().__init__(f"{field_name} {value} does not reference an existing record")


class RecordValidationError(StorageError):
    """Raised when a field value breaks a schema constraint."""


# =============================================================================
# VALIDATION
# =============================================================================


def require_text(value: str | None, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise RecordValidationError(f"{field_name} is required")
    return value


def check_choice(value: str, choices: tuple[str, ...], field_name: str) -> str:
    try:
        return validate_choice(value, choices, field_name)
    except ValueError as e:
        raise RecordValidationError(str(e)) from e


def check_score(value: int, field_name: str) -> int:
    try:
        return validate_score(value, field_name)
    except ValueError as e:
        raise RecordValidationError(str(e)) from e


def check_user_fields(fields: dict[str, Any]) -> None:
    unknown = set(fields) - USER_UPDATABLE_FIELDS
    if unknown:
        raise RecordValidationError(f"Cannot update user fields: {', '.join(sorted(unknown))}")
    if "username" in fields:
        require_text(fields["username"], "username")
    if "password" in fields:
        require_text(fields["password"], "password")


def progress_fields(status: str, progress: int) -> tuple[int, str | None]:
    """Normalize progress for a status; completed means 100% with a timestamp."""
    check_choice(status, PROGRESS_STATUSES, "status")
    check_score(progress, "progress")
    if status == "completed":
        return 100, utc_now()
    return progress, None


def attempt_outcome(
    score: int | None, passing_score: int
) -> tuple[bool | None, str | None]:
    """Derive (passed, completed_at) for an attempt with an optional score."""
    if score is None:
        return None, None
    check_score(score, "score")
    return score >= passing_score, utc_now()


# =============================================================================
# INTERFACE
# =============================================================================


class Storage(ABC):
    """CRUD operations over the portal schema."""

    # Users
    @abstractmethod
    def get_user(self, user_id: int) -> User | None: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> User | None: ...

    @abstractmethod
    def create_user(
        self,
        username: str,
        password: str,
        email: str | None = None,
        role: str = DEFAULT_ROLE,
    ) -> User:
        """Create a user. `password` must already be hashed.

        Raises:
            DuplicateUsernameError: If the username is taken.
        """

    @abstractmethod
    def update_user(self, user_id: int, **fields: Any) -> User:
        """Update user fields.

        Raises:
            NotFoundError: If the user does not exist.
            DuplicateUsernameError: If renaming to a taken username.
        """

    @abstractmethod
    def list_users(self) -> list[User]: ...

    # Modules
    @abstractmethod
    def get_modules(self) -> list[Module]: ...

    @abstractmethod
    def get_module_by_id(self, module_id: int) -> Module | None: ...

    @abstractmethod
    def create_module(
        self,
        title: str,
        description: str,
        duration: str,
        level: str,
        category: str,
        content: str | None = None,
    ) -> Module: ...

    # Module progress
    @abstractmethod
    def get_module_progress(self, user_id: int) -> list[ModuleProgress]: ...

    @abstractmethod
    def upsert_module_progress(
        self, user_id: int, module_id: int, status: str, progress: int = 0
    ) -> ModuleProgress:
        """Create or replace the progress row for (user, module)."""

    # Assessments
    @abstractmethod
    def get_assessments(self) -> list[Assessment]: ...

    @abstractmethod
    def get_assessment_by_id(self, assessment_id: int) -> Assessment | None: ...

    @abstractmethod
    def create_assessment(
        self,
        title: str,
        description: str,
        questions: list[Any],
        module_id: int | None = None,
        time_limit: str | None = None,
        passing_score: int = DEFAULT_PASSING_SCORE,
    ) -> Assessment: ...

    # Assessment attempts
    @abstractmethod
    def create_assessment_attempt(
        self,
        user_id: int,
        assessment_id: int,
        score: int | None = None,
        answers: Any = None,
    ) -> AssessmentAttempt: ...

    @abstractmethod
    def get_assessment_attempts(self, user_id: int) -> list[AssessmentAttempt]: ...

    # Resources
    @abstractmethod
    def get_resources(self) -> list[Resource]: ...

    @abstractmethod
    def get_resource_by_id(self, resource_id: int) -> Resource | None: ...

    @abstractmethod
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
    ) -> Resource: ...

    # Security events
    @abstractmethod
    def get_security_events(self) -> list[SecurityEvent]: ...

    @abstractmethod
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
    ) -> SecurityEvent: ...

    # Activity logs
    @abstractmethod
    def create_activity_log(
        self,
        user_id: int,
        action: str,
        details: dict[str, Any] | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> ActivityLog: ...

    @abstractmethod
    def get_activity_logs(self, user_id: int, limit: int = 50) -> list[ActivityLog]:
        """Activity for one user, newest first."""


# =============================================================================
# IN-MEMORY BACKEND
# =============================================================================


class _Table(dict):
    """A dict of records keyed by a serial id starting at 1."""

    def __init__(self) -> None:
        super().__init__()
        self.next_id = 1

    def allocate_id(self) -> int:
        record_id = self.next_id
        self.next_id += 1
        return record_id


class MemStorage(Storage):
    """Map-backed storage. Records live for the lifetime of the process.

    Returned records are copies; mutate through the update methods.
    """

    def __init__(self) -> None:
        self._users: _Table = _Table()
        self._modules: _Table = _Table()
        self._progress: _Table = _Table()
        self._assessments: _Table = _Table()
        self._attempts: _Table = _Table()
        self._resources: _Table = _Table()
        self._events: _Table = _Table()
        self._activity: _Table = _Table()

    @staticmethod
    def _copy(record: T | None) -> T | None:
        return copy.deepcopy(record)

    def _require_user(self, user_id: int) -> None:
        if user_id not in self._users:
            raise ForeignKeyError("user_id", user_id)

    # Users

    def get_user(self, user_id: int) -> User | None:
        return self._copy(self._users.get(user_id))

    def get_user_by_username(self, username: str) -> User | None:
        for user in self._users.values():
            if user.username == username:
                return self._copy(user)
        return None

    def create_user(
        self,
        username: str,
        password: str,
        email: str | None = None,
        role: str = DEFAULT_ROLE,
    ) -> User:
        require_text(username, "username")
        require_text(password, "password")
        if self.get_user_by_username(username) is not None:
            raise DuplicateUsernameError(username)

        user = User(
            id=self._users.allocate_id(),
            username=username,
            password=password,
            email=email,
            role=role or DEFAULT_ROLE,
        )
        self._users[user.id] = user
        logger.debug("users.inserted", user_id=user.id)
        return self._copy(user)

    def update_user(self, user_id: int, **fields: Any) -> User:
        check_user_fields(fields)
        user = self._users.get(user_id)
        if user is None:
            raise NotFoundError("users", user_id)

        new_name = fields.get("username")
        if new_name is not None and new_name != user.username:
            if self.get_user_by_username(new_name) is not None:
                raise DuplicateUsernameError(new_name)

        for key, value in fields.items():
            setattr(user, key, copy.deepcopy(value))
        return self._copy(user)

    def list_users(self) -> list[User]:
        return [self._copy(u) for u in self._users.values()]

    # Modules

    def get_modules(self) -> list[Module]:
        return [self._copy(m) for m in self._modules.values()]

    def get_module_by_id(self, module_id: int) -> Module | None:
        return self._copy(self._modules.get(module_id))

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

        module = Module(
            id=self._modules.allocate_id(),
            title=title,
            description=description,
            duration=duration,
            level=level,
            category=category,
            content=content,
        )
        self._modules[module.id] = module
        return self._copy(module)

    # Module progress

    def get_module_progress(self, user_id: int) -> list[ModuleProgress]:
        return [self._copy(p) for p in self._progress.values() if p.user_id == user_id]

    def upsert_module_progress(
        self, user_id: int, module_id: int, status: str, progress: int = 0
    ) -> ModuleProgress:
        self._require_user(user_id)
        if module_id not in self._modules:
            raise ForeignKeyError("module_id", module_id)
        progress, completed_at = progress_fields(status, progress)

        existing = next(
            (
                p
                for p in self._progress.values()
                if p.user_id == user_id and p.module_id == module_id
            ),
            None,
        )
        record_id = existing.id if existing else self._progress.allocate_id()
        record = ModuleProgress(
            id=record_id,
            user_id=user_id,
            module_id=module_id,
            status=status,
            progress=progress,
            completed_at=completed_at,
        )
        self._progress[record_id] = record
        return self._copy(record)

    # Assessments

    def get_assessments(self) -> list[Assessment]:
        return [self._copy(a) for a in self._assessments.values()]

    def get_assessment_by_id(self, assessment_id: int) -> Assessment | None:
        return self._copy(self._assessments.get(assessment_id))

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
        if module_id is not None and module_id not in self._modules:
            raise ForeignKeyError("module_id", module_id)

        assessment = Assessment(
            id=self._assessments.allocate_id(),
            title=title,
            description=description,
            questions=copy.deepcopy(questions),
            module_id=module_id,
            time_limit=time_limit,
            passing_score=passing_score,
        )
        self._assessments[assessment.id] = assessment
        return self._copy(assessment)

    # Assessment attempts

    def create_assessment_attempt(
        self,
        user_id: int,
        assessment_id: int,
        score: int | None = None,
        answers: Any = None,
    ) -> AssessmentAttempt:
        self._require_user(user_id)
        assessment = self._assessments.get(assessment_id)
        if assessment is None:
            raise ForeignKeyError("assessment_id", assessment_id)
        passed, completed_at = attempt_outcome(score, assessment.passing_score)

        attempt = AssessmentAttempt(
            id=self._attempts.allocate_id(),
            user_id=user_id,
            assessment_id=assessment_id,
            score=score,
            passed=passed,
            answers=copy.deepcopy(answers),
            completed_at=completed_at,
        )
        self._attempts[attempt.id] = attempt
        return self._copy(attempt)

    def get_assessment_attempts(self, user_id: int) -> list[AssessmentAttempt]:
        return [self._copy(a) for a in self._attempts.values() if a.user_id == user_id]

    # Resources

    def get_resources(self) -> list[Resource]:
        return [self._copy(r) for r in self._resources.values()]

    def get_resource_by_id(self, resource_id: int) -> Resource | None:
        return self._copy(self._resources.get(resource_id))

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

        resource = Resource(
            id=self._resources.allocate_id(),
            title=title,
            description=description,
            type=type,
            category=category,
            url=url,
            file_size=file_size,
            duration=duration,
            popular=popular,
        )
        self._resources[resource.id] = resource
        return self._copy(resource)

    # Security events

    def get_security_events(self) -> list[SecurityEvent]:
        return [self._copy(e) for e in self._events.values()]

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

        event = SecurityEvent(
            id=self._events.allocate_id(),
            title=title,
            description=description,
            category=category,
            severity=severity,
            content=content,
            source=source,
            recommendations=list(recommendations or []),
            industries=list(industries or []),
            tags=list(tags or []),
        )
        self._events[event.id] = event
        return self._copy(event)

    # Activity logs

    def create_activity_log(
        self,
        user_id: int,
        action: str,
        details: dict[str, Any] | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> ActivityLog:
        self._require_user(user_id)
        require_text(action, "action")

        entry = ActivityLog(
            id=self._activity.allocate_id(),
            user_id=user_id,
            action=action,
            details=copy.deepcopy(details),
            ip_address=ip_address,
            user_agent=user_agent,
        )
        self._activity[entry.id] = entry
        return self._copy(entry)

    def get_activity_logs(self, user_id: int, limit: int = 50) -> list[ActivityLog]:
        entries = [e for e in self._activity.values() if e.user_id == user_id]
        entries.sort(key=lambda e: e.id, reverse=True)
        return [self._copy(e) for e in entries[:limit]]
