"""FastAPI application factory.

Main entry point for the CyberGuard Web API. Run with
`uvicorn cyberguard.web.api:create_app --factory` or `cyberguard serve`.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic.alias_generators import to_camel
from starlette.middleware.sessions import SessionMiddleware

from cyberguard import __version__
from cyberguard.config.app_config import AppConfig, load_app_config
from cyberguard.core.auth import PasswordHasher
from cyberguard.core.catalog import seed_storage
from cyberguard.db import Storage, create_storage
from cyberguard.utils.logging import bind_request_context, clear_request_context, setup_logging
from cyberguard.web.routes import (
    health_router,
    auth_router,
    dashboard_router,
    modules_router,
    assessments_router,
    threats_router,
    resources_router,
    reports_router,
    settings_router,
)

logger = structlog.get_logger(__name__)

VALUE_ERROR_PREFIX = "Value error, "
_LOCATION_ROOTS = ("body", "query", "path")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup/shutdown events."""
    config: AppConfig = app.state.config
    storage: Storage = app.state.storage
    setup_logging(config)
    if config.storage.seed_on_startup:
        seed_storage(storage)
    logger.info(
        "api_startup",
        environment=config.environment,
        storage_backend=type(storage).__name__,
        modules=len(storage.get_modules()),
        users=len(storage.list_users()),
    )
    yield
    logger.info("api_shutdown")


def _field_name(loc: tuple) -> str:
    """Wire name of the field an error points at.

    Errors raised on a default value carry the Python name, not the alias.
    """
    parts = [str(p) for p in loc if p not in _LOCATION_ROOTS]
    if not parts:
        return "body"
    return to_camel(parts[0]) if "_" in parts[0] else parts[0]


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Collapse pydantic errors into one message per field."""
    errors: dict[str, str] = {}
    for error in exc.errors():
        message = error.get("msg", "Invalid value")
        if message.startswith(VALUE_ERROR_PREFIX):
            message = message[len(VALUE_ERROR_PREFIX):]
        errors.setdefault(_field_name(tuple(error.get("loc", ()))), message)

    logger.info("request_validation_failed", path=request.url.path, fields=sorted(errors))
    return JSONResponse(
        status_code=422,
        content={"detail": "Validation failed", "errors": errors},
    )


def create_app(config: AppConfig | None = None, storage: Storage | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Application config; defaults to load_app_config().
        storage: Storage backend; defaults to the backend named in config.

    Returns:
        Configured FastAPI app instance
    """
    config = config or load_app_config()

    app = FastAPI(
        title="CyberGuard API",
        description="Web API for the CyberGuard security awareness portal",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.storage = storage if storage is not None else create_storage(config.storage)
    app.state.password_hasher = PasswordHasher(rounds=config.auth.bcrypt_rounds)

    app.add_middleware(
        SessionMiddleware,
        secret_key=config.auth.get_session_secret(),
        session_cookie=config.auth.session_cookie,
        max_age=config.auth.session_max_age,
        same_site="lax",
        https_only=config.auth.https_only,
    )

    # CORS middleware for web clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        bind_request_context(method=request.method, path=request.url.path)
        try:
            return await call_next(request)
        finally:
            clear_request_context()

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Include routers
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(dashboard_router)
    app.include_router(modules_router)
    app.include_router(assessments_router)
    app.include_router(threats_router)
    app.include_router(resources_router)
    app.include_router(reports_router)
    app.include_router(settings_router)

    return app
