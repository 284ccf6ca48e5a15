"""Health check endpoint."""

from fastapi import APIRouter

from cyberguard import __version__
from cyberguard.web.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check API health status. Does not require a session."""
    return HealthResponse(status="ok", version=__version__)
