"""Dashboard endpoints: score card, team progress, activity, modules and news."""

from fastapi import APIRouter, Depends

from cyberguard.config.portal_content import get_section
from cyberguard.web.deps import require_user
from cyberguard.web.schemas import (
    ActivityItem,
    DashboardModule,
    NewsItem,
    SecurityScoreResponse,
    TeamMemberProgress,
)

router = APIRouter(
    prefix="/api/dashboard",
    tags=["dashboard"],
    dependencies=[Depends(require_user)],
)


@router.get("/security-score", response_model=SecurityScoreResponse)
async def security_score() -> SecurityScoreResponse:
    return SecurityScoreResponse(**get_section("security_score"))


@router.get("/team-progress", response_model=list[TeamMemberProgress])
async def team_progress() -> list[dict]:
    return get_section("team_progress")


@router.get("/activities", response_model=list[ActivityItem])
async def activities() -> list[dict]:
    return get_section("activities")


@router.get("/modules", response_model=list[DashboardModule], response_model_exclude_none=True)
async def dashboard_modules() -> list[dict]:
    """Modules shown on the dashboard, with progress or rating when known."""
    return get_section("dashboard_modules")


@router.get("/news", response_model=list[NewsItem], response_model_exclude_none=True)
async def news() -> list[dict]:
    return get_section("news")
