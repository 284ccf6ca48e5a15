"""Route handlers for the Web API."""

from cyberguard.web.routes.health import router as health_router
from cyberguard.web.routes.auth import router as auth_router
from cyberguard.web.routes.dashboard import router as dashboard_router
from cyberguard.web.routes.modules import router as modules_router
from cyberguard.web.routes.assessments import router as assessments_router
from cyberguard.web.routes.threats import router as threats_router
from cyberguard.web.routes.resources import router as resources_router
from cyberguard.web.routes.reports import router as reports_router
from cyberguard.web.routes.settings import router as settings_router

__all__ = [
    "health_router",
    "auth_router",
    "dashboard_router",
    "modules_router",
    "assessments_router",
    "threats_router",
    "resources_router",
    "reports_router",
    "settings_router",
]
