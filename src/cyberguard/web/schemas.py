"""Pydantic response schemas for the Web API.

Fields are snake_case in Python and camelCase on the wire. Optional fields
left as None are dropped from list payloads (routes use
response_model_exclude_none).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


# =============================================================================
# DASHBOARD SCHEMAS
# =============================================================================


class SecurityScoreResponse(CamelModel):
    score: int
    change: int
    strengths: int
    warnings: int
    critical: int


class TeamMemberProgress(CamelModel):
    username: str
    progress: int


class ActivityItem(CamelModel):
    id: int
    type: str
    title: str
    time: str


class DashboardModule(CamelModel):
    id: int
    title: str
    description: str
    status: str
    duration: str
    rating: float | None = None
    progress: int | None = None


class NewsItem(CamelModel):
    id: int
    category: str
    title: str
    description: str
    time: str
    is_critical: bool | None = None


# =============================================================================
# CATALOG SCHEMAS
# =============================================================================


class LearningModule(CamelModel):
    """A training module as listed on the learning modules page."""

    id: int
    title: str
    description: str
    category: str
    duration: str
    status: str
    level: str
    progress: int | None = None
    rating: float | None = None


class AssessmentItem(CamelModel):
    id: int
    title: str
    description: str
    questions: int
    time_limit: str
    status: str
    score: int | None = None
    related_module: str | None = None
    completed_date: str | None = None
    due_date: str | None = None


class AssessmentCounts(BaseModel):
    all: int
    completed: int
    pending: int


class AssessmentSummary(CamelModel):
    counts: AssessmentCounts
    average_score: int


class ThreatItem(CamelModel):
    """A threat-intelligence bulletin."""

    id: int
    title: str
    summary: str
    category: str
    severity: str
    date: str
    source: str
    content: str
    industries: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class ResourceItem(CamelModel):
    id: int
    title: str
    description: str
    type: str
    category: str
    url: str
    file_size: str | None = None
    duration: str | None = None
    last_updated: str | None = None
    popular: bool | None = None


# =============================================================================
# REPORT SCHEMAS
# =============================================================================


class TeamMemberReport(CamelModel):
    id: int
    username: str
    role: str
    completed_modules: int
    total_modules: int
    completed_assessments: int
    total_assessments: int
    average_score: int
    last_activity: str


class ModuleCompletion(CamelModel):
    name: str
    completed: int
    in_progress: int
    not_started: int


class AssessmentScore(CamelModel):
    name: str
    average_score: int
    users_completed: int


class AwarenessPoint(CamelModel):
    date: str
    awareness_score: int


class SecurityIncident(CamelModel):
    id: int
    type: str
    date: str
    source: str
    status: str
    impact: str


class ChartSlice(CamelModel):
    name: str
    value: int


class ModuleCompletionRate(CamelModel):
    name: str
    percentage: int


class ReportsOverview(CamelModel):
    """Headline figures computed from the team and module reports."""

    completion_rate: int
    average_score: int
    active_today: int
    team_size: int
    completion_breakdown: list[ChartSlice]
    module_completion_rates: list[ModuleCompletionRate]


# =============================================================================
# USER SCHEMAS
# =============================================================================


class UserResponse(CamelModel):
    """A user as returned to the client. Never carries the password hash."""

    id: int
    username: str
    email: str | None = None
    role: str | None = None
    company: str | None = None
    phone: str | None = None
    bio: str | None = None
    created_at: str | None = None
    last_login: str | None = None

    model_config = {**CamelModel.model_config, "from_attributes": True}


class ActivityLogResponse(CamelModel):
    id: int
    action: str
    details: dict[str, Any] | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: str

    model_config = {**CamelModel.model_config, "from_attributes": True}


class MessageResponse(BaseModel):
    message: str


# =============================================================================
# HEALTH SCHEMAS
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
