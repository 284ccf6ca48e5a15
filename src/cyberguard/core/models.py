"""Record types for the portal's relational schema.

Each record mirrors one table in cyberguard.db.database. Timestamps are
ISO 8601 strings in UTC; JSON columns are plain lists/dicts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

DEFAULT_ROLE = "user"
DEFAULT_PASSING_SCORE = 70

MODULE_LEVELS = ("beginner", "intermediate", "advanced")
PROGRESS_STATUSES = ("not-started", "in-progress", "completed")
SEVERITIES = ("informational", "low", "medium", "high", "critical")
RESOURCE_TYPES = ("document", "video", "template", "link")
EMAIL_DIGESTS = ("daily", "weekly", "monthly", "never")


def utc_now() -> str:
    """Current time as an ISO 8601 string."""
    return datetime.now(timezone.utc).isoformat()


def default_notification_settings() -> dict[str, Any]:
    return {
        "security_alerts": True,
        "new_modules": True,
        "assessment_reminders": True,
        "team_updates": False,
        "marketing_emails": False,
        "email_digest": "daily",
    }


@dataclass
class User:
    """A portal account. `password` holds the bcrypt hash, never plaintext."""

    id: int
    username: str
    password: str
    email: str | None = None
    role: str = DEFAULT_ROLE
    company: str | None = None
    phone: str | None = None
    bio: str | None = None
    notification_settings: dict[str, Any] = field(
        default_factory=default_notification_settings
    )
    created_at: str = field(default_factory=utc_now)
    last_login: str | None = None


@dataclass
class Module:
    id: int
    title: str
    description: str
    duration: str
    level: str
    category: str
    content: str | None = None
    created_at: str = field(default_factory=utc_now)
    updated_at: str = field(default_factory=utc_now)


@dataclass
class ModuleProgress:
    """A user's progress through one module."""

    id: int
    user_id: int
    module_id: int
    status: str
    progress: int = 0
    completed_at: str | None = None
    last_activity: str = field(default_factory=utc_now)


@dataclass
class Assessment:
    id: int
    title: str
    description: str
    questions: list[Any]
    module_id: int | None = None
    time_limit: str | None = None
    passing_score: int = DEFAULT_PASSING_SCORE
    created_at: str = field(default_factory=utc_now)
    updated_at: str = field(default_factory=utc_now)


@dataclass
class AssessmentAttempt:
    """One user's attempt at an assessment.

    `score` and `passed` stay None until the attempt is completed.
    """

    id: int
    user_id: int
    assessment_id: int
    score: int | None = None
    passed: bool | None = None
    answers: Any = None
    started_at: str = field(default_factory=utc_now)
    completed_at: str | None = None


@dataclass
class SecurityEvent:
    """A threat-intelligence bulletin."""

    id: int
    title: str
    description: str
    category: str
    severity: str
    content: str | None = None
    source: str | None = None
    recommendations: list[str] = field(default_factory=list)
    industries: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    published_at: str = field(default_factory=utc_now)


@dataclass
class Resource:
    id: int
    title: str
    description: str
    type: str
    category: str
    url: str
    file_size: str | None = None
    duration: str | None = None
    popular: bool = False
    created_at: str = field(default_factory=utc_now)
    updated_at: str = field(default_factory=utc_now)


@dataclass
class ActivityLog:
    id: int
    user_id: int
    action: str
    details: dict[str, Any] | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: str = field(default_factory=utc_now)
