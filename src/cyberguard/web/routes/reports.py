"""Report endpoints for team progress and security awareness charts."""

from fastapi import APIRouter, Depends

from cyberguard.config.portal_content import get_section
from cyberguard.core.reports import build_reports_overview
from cyberguard.web.deps import require_user
from cyberguard.web.schemas import (
    AssessmentScore,
    AwarenessPoint,
    ModuleCompletion,
    ReportsOverview,
    SecurityIncident,
    TeamMemberReport,
)

router = APIRouter(prefix="/api/reports", tags=["reports"], dependencies=[Depends(require_user)])


@router.get("/team-progress", response_model=list[TeamMemberReport])
async def team_progress() -> list[dict]:
    return get_section("report_team_progress")


@router.get("/module-completion", response_model=list[ModuleCompletion])
async def module_completion() -> list[dict]:
    return get_section("module_completion")


@router.get("/assessment-scores", response_model=list[AssessmentScore])
async def assessment_scores() -> list[dict]:
    return get_section("assessment_scores")


@router.get("/awareness-trend", response_model=list[AwarenessPoint])
async def awareness_trend() -> list[dict]:
    return get_section("awareness_trend")


@router.get("/security-incidents", response_model=list[SecurityIncident])
async def security_incidents() -> list[dict]:
    return get_section("security_incidents")


@router.get("/overview", response_model=ReportsOverview)
async def overview() -> dict:
    """Completion rate, average score, active members and chart data."""
    return build_reports_overview(
        get_section("report_team_progress"),
        get_section("module_completion"),
    )
