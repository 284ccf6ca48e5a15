"""Security resource library."""

from fastapi import APIRouter, Depends, Query

from cyberguard.config.portal_content import get_section
from cyberguard.core.filters import filter_resources
from cyberguard.web.deps import require_user
from cyberguard.web.schemas import ResourceItem

router = APIRouter(prefix="/api/resources", tags=["resources"], dependencies=[Depends(require_user)])


@router.get("", response_model=list[ResourceItem], response_model_exclude_none=True)
async def list_resources(
    search: str | None = Query(None),
    tab: str | None = Query(None, description="all, popular, documents, videos, templates or a category"),
) -> list[dict]:
    return filter_resources(get_section("resources"), search=search, tab=tab)
