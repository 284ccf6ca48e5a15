"""Web API for the CyberGuard portal.

Provides:
- FastAPI application with session-cookie authentication
- Dashboard, catalog and report endpoints
- Registration, login and account settings
"""

from cyberguard.web.api import create_app

__all__ = ["create_app"]
