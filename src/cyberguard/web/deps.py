"""Request dependencies shared by the route handlers."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status

from cyberguard.core.auth import PasswordHasher
from cyberguard.core.models import User
from cyberguard.db.storage import Storage

SESSION_USER_KEY = "user_id"


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_current_user(
    request: Request, storage: Storage = Depends(get_storage)
) -> User | None:
    """User bound to the session cookie, or None.

    A session pointing at a user that no longer exists is cleared.
    """
    user_id = request.session.get(SESSION_USER_KEY)
    if user_id is None:
        return None
    user = storage.get_user(int(user_id))
    if user is None:
        request.session.clear()
    return user


def require_user(user: User | None = Depends(get_current_user)) -> User:
    """Reject the request with 401 unless a user is logged in."""
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return user


def login_session(request: Request, user: User) -> None:
    request.session.clear()
    request.session[SESSION_USER_KEY] = user.id


def client_info(request: Request) -> tuple[str | None, str | None]:
    """Client IP address and user agent for activity logging."""
    ip_address = request.client.host if request.client else None
    return ip_address, request.headers.get("user-agent")
