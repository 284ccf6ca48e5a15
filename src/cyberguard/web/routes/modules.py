"""Learning module catalog."""

from fastapi import APIRouter, Depends, Query

from cyberguard.config.portal_content import get_section
from cyberguard.core.filters import filter_modules
from cyberguard.web.deps import require_user
from cyberguard.web.schemas import LearningModule

router = APIRouter(prefix="/api/modules", tags=["modules"], dependencies=[Depends(require_user)])


@router.get("", response_model=list[LearningModule], response_model_exclude_none=True)
async def list_modules(
    search: str | None = Query(None, description="Substring of title or description"),
    category: str | None = Query(None, description="'all' or a category name"),
    status: str | None = Query(None, description="'all', not-started, in-progress or completed"),
) -> list[dict]:
    """List modules, optionally filtered."""
    return filter_modules(get_section("modules"), search=search, category=category, status=status)
