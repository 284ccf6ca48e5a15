"""Account settings: profile, password and notification preferences."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, status

from cyberguard.core.auth import PasswordHasher
from cyberguard.core.models import User, default_notification_settings
from cyberguard.db.storage import DuplicateUsernameError, Storage
from cyberguard.web.deps import client_info, get_hasher, get_storage, require_user
from cyberguard.web.forms import NotificationPreferences, PasswordChangeRequest, ProfileUpdateRequest
from cyberguard.web.schemas import MessageResponse, UserResponse

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/settings", tags=["settings"])


def _record(storage: Storage, request: Request, user: User, action: str) -> None:
    ip_address, user_agent = client_info(request)
    storage.create_activity_log(user.id, action, ip_address=ip_address, user_agent=user_agent)


@router.put("/profile", response_model=UserResponse)
def update_profile(
    form: ProfileUpdateRequest,
    request: Request,
    user: User = Depends(require_user),
    storage: Storage = Depends(get_storage),
) -> UserResponse:
    """Update username, email, role, company, phone and bio."""
    existing = storage.get_user_by_username(form.username)
    if existing is not None and existing.id != user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already exists")

    try:
        updated = storage.update_user(user.id, **form.model_dump())
    except DuplicateUsernameError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    _record(storage, request, updated, "profile_update")
    logger.info("profile_updated", user_id=user.id)
    return UserResponse.model_validate(updated)


@router.put("/password", response_model=MessageResponse)
def change_password(
    form: PasswordChangeRequest,
    request: Request,
    user: User = Depends(require_user),
    storage: Storage = Depends(get_storage),
    hasher: PasswordHasher = Depends(get_hasher),
) -> MessageResponse:
    """Replace the password after checking the current one."""
    if not hasher.verify(form.current_password, user.password):
        logger.warning("password_change_rejected", user_id=user.id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect",
        )

    storage.update_user(user.id, password=hasher.hash(form.new_password))
    _record(storage, request, user, "password_change")
    logger.info("password_changed", user_id=user.id)
    return MessageResponse(message="Password updated")


@router.get("/notifications", response_model=NotificationPreferences)
async def get_notifications(user: User = Depends(require_user)) -> NotificationPreferences:
    settings = {**default_notification_settings(), **(user.notification_settings or {})}
    return NotificationPreferences(**settings)


@router.put("/notifications", response_model=NotificationPreferences)
def update_notifications(
    form: NotificationPreferences,
    request: Request,
    user: User = Depends(require_user),
    storage: Storage = Depends(get_storage),
) -> NotificationPreferences:
    """Store the notification switches and digest frequency."""
    updated = storage.update_user(user.id, notification_settings=form.model_dump())
    _record(storage, request, updated, "notifications_update")
    return NotificationPreferences(**updated.notification_settings)
