"""Assessment list and summary."""

from typing import Literal

from fastapi import APIRouter, Depends, Query

from cyberguard.config.portal_content import get_section
from cyberguard.core.filters import filter_assessments
from cyberguard.core.reports import build_assessment_summary
from cyberguard.web.deps import require_user
from cyberguard.web.schemas import AssessmentItem, AssessmentSummary

router = APIRouter(
    prefix="/api/assessments",
    tags=["assessments"],
    dependencies=[Depends(require_user)],
)


@router.get("", response_model=list[AssessmentItem], response_model_exclude_none=True)
async def list_assessments(
    tab: Literal["all", "completed", "pending"] | None = Query(None),
) -> list[dict]:
    """List assessments. The pending tab covers in-progress and not-started."""
    return filter_assessments(get_section("assessments"), tab=tab)


@router.get("/summary", response_model=AssessmentSummary)
async def assessment_summary() -> dict:
    """Tab counts and the average score of completed assessments."""
    return build_assessment_summary(get_section("assessments"))
