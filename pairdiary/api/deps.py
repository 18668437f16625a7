"""Common API dependencies: session token extraction, current user."""

from typing import Optional

from fastapi import Depends
from fastapi.security import APIKeyCookie, APIKeyHeader
from sqlmodel import Session

from pairdiary.config import settings
from pairdiary.database import get_session
from pairdiary.errors import AuthError
from pairdiary.models.user import User
from pairdiary.services.session_service import session_manager_for

header_scheme = APIKeyHeader(name=settings.session_header_name, auto_error=False)
cookie_scheme = APIKeyCookie(name=settings.session_cookie_name, auto_error=False)


def get_session_token(
    header_token: Optional[str] = Depends(header_scheme),
    cookie_token: Optional[str] = Depends(cookie_scheme),
) -> Optional[str]:
    """Session token from the X-Session-ID header, falling back to the cookie."""
    return header_token or cookie_token


def get_optional_user(
    token: Optional[str] = Depends(get_session_token),
    session: Session = Depends(get_session),
) -> Optional[User]:
    """The signed-in user, or None for anonymous requests."""
    if not token:
        return None
    manager = session_manager_for(session)
    user_id = manager.resolve(token)
    if user_id is None:
        return None
    user = session.get(User, user_id)
    if not user:
        manager.destroy(token)
    return user


def get_current_user(
    token: Optional[str] = Depends(get_session_token),
    user: Optional[User] = Depends(get_optional_user),
) -> User:
    if not token:
        raise AuthError("Login required")
    if user is None:
        raise AuthError("Session is invalid or has expired")
    return user
