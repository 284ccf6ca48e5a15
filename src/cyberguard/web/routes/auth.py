"""Registration, login, logout and current-user endpoints.

Handlers are plain functions so bcrypt work runs in the threadpool.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from cyberguard.core.auth import PasswordHasher
from cyberguard.core.models import User, utc_now
from cyberguard.db.storage import DuplicateUsernameError, Storage
from cyberguard.web.deps import (
    client_info,
    get_current_user,
    get_hasher,
    get_storage,
    login_session,
    require_user,
)
from cyberguard.web.forms import LoginRequest, RegisterRequest
from cyberguard.web.schemas import ActivityLogResponse, MessageResponse, UserResponse

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])

USERNAME_TAKEN = "Username already exists"
INVALID_CREDENTIALS = "Invalid username or password"


def _log_activity(storage: Storage, request: Request, user: User, action: str, **details) -> None:
    ip_address, user_agent = client_info(request)
    storage.create_activity_log(
        user.id,
        action,
        details=details or None,
        ip_address=ip_address,
        user_agent=user_agent,
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    form: RegisterRequest,
    request: Request,
    storage: Storage = Depends(get_storage),
    hasher: PasswordHasher = Depends(get_hasher),
) -> UserResponse:
    """Create an account and log it in."""
    if storage.get_user_by_username(form.username) is not None:
        logger.info("register_rejected", username=form.username, reason="duplicate")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=USERNAME_TAKEN)

    try:
        user = storage.create_user(
            username=form.username,
            password=hasher.hash(form.password),
            email=form.email,
        )
    except DuplicateUsernameError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=USERNAME_TAKEN)

    user = storage.update_user(user.id, last_login=utc_now())
    login_session(request, user)
    _log_activity(storage, request, user, "register")
    logger.info("user_registered", user_id=user.id, username=user.username)
    return UserResponse.model_validate(user)


@router.post("/login", response_model=UserResponse)
def login(
    form: LoginRequest,
    request: Request,
    storage: Storage = Depends(get_storage),
    hasher: PasswordHasher = Depends(get_hasher),
) -> UserResponse:
    """Verify credentials and start a session."""
    user = storage.get_user_by_username(form.username)
    if user is None or not hasher.verify(form.password, user.password):
        ip_address, _ = client_info(request)
        logger.warning("login_failed", username=form.username, ip_address=ip_address)
        if user is not None:
            _log_activity(storage, request, user, "login_failed")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS,
        )

    user = storage.update_user(user.id, last_login=utc_now())
    login_session(request, user)
    _log_activity(storage, request, user, "login")
    logger.info("login_succeeded", user_id=user.id)
    return UserResponse.model_validate(user)


@router.post("/logout", response_model=MessageResponse)
def logout(
    request: Request,
    user: User | None = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> MessageResponse:
    """End the session. Succeeds without a session too."""
    if user is not None:
        _log_activity(storage, request, user, "logout")
        logger.info("logout", user_id=user.id)
    request.session.clear()
    return MessageResponse(message="Logged out")


@router.get("/user", response_model=UserResponse)
async def current_user(user: User = Depends(require_user)) -> UserResponse:
    """Return the logged-in user."""
    return UserResponse.model_validate(user)


@router.get("/user/activity", response_model=list[ActivityLogResponse])
def user_activity(
    limit: int = Query(50, ge=1, le=200),
    user: User = Depends(require_user),
    storage: Storage = Depends(get_storage),
) -> list[ActivityLogResponse]:
    """Recent activity of the logged-in user, newest first."""
    return [
        ActivityLogResponse.model_validate(entry)
        for entry in storage.get_activity_logs(user.id, limit=limit)
    ]
