"""Threat intelligence bulletins."""

from typing import Literal

from fastapi import APIRouter, Depends, Query

from cyberguard.config.portal_content import get_section
from cyberguard.core.filters import filter_threats
from cyberguard.web.deps import require_user
from cyberguard.web.schemas import ThreatItem

router = APIRouter(prefix="/api/threats", tags=["threats"], dependencies=[Depends(require_user)])


@router.get("", response_model=list[ThreatItem])
async def list_threats(
    search: str | None = Query(None, description="Substring of title or summary"),
    tab: Literal["all", "critical", "recent"] | None = Query(None),
) -> list[dict]:
    """List threat bulletins, optionally filtered."""
    return filter_threats(get_section("threats"), search=search, tab=tab)
