"""Registration, login and logout endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response
from sqlmodel import Session

from pairdiary.api.deps import get_current_user, get_session_token
from pairdiary.config import settings
from pairdiary.database import get_session
from pairdiary.models.user import User
from pairdiary.schemas.auth import CredentialsRequest, LoginResponse, LogoutAllResponse, UserResponse
from pairdiary.schemas.common import Envelope, ok
from pairdiary.services import identity_service
from pairdiary.services.session_service import session_manager_for

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        username=user.username,
        account_id=user.account_id,
        created_at=user.created_at.isoformat() if user.created_at else "",
    )


@router.post("/register", response_model=Envelope[UserResponse])
def register(request: CredentialsRequest, session: Session = Depends(get_session)):
    """Create an account. A solo room is opened for it at the same time."""
    user = identity_service.register(request.username, request.password, session)
    return ok(_user_to_response(user))


@router.post("/login", response_model=Envelope[LoginResponse])
def login(request: CredentialsRequest, response: Response, session: Session = Depends(get_session)):
    """Check credentials and start a session.

    The token is returned in the body (for the X-Session-ID header) and
    also set as an HttpOnly cookie.
    """
    user = identity_service.authenticate(request.username, request.password, session)
    token = session_manager_for(session).create(user.id)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        samesite="lax",
    )
    logger.info("User %s logged in", user.id)
    return ok(LoginResponse(**_user_to_response(user).model_dump(), session_id=token))


@router.post("/logout", response_model=Envelope[None])
def logout(
    response: Response,
    user: User = Depends(get_current_user),
    token: Optional[str] = Depends(get_session_token),
    session: Session = Depends(get_session),
):
    session_manager_for(session).destroy(token)
    response.delete_cookie(settings.session_cookie_name)
    logger.info("User %s logged out", user.id)
    return ok()


@router.post("/logout-all", response_model=Envelope[LogoutAllResponse])
def logout_all(
    response: Response,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """End every session of the current user, on every device."""
    closed = session_manager_for(session).destroy_all(user.id)
    response.delete_cookie(settings.session_cookie_name)
    logger.info("User %s closed %d session(s)", user.id, closed)
    return ok(LogoutAllResponse(sessions_closed=closed))


@router.get("/me", response_model=Envelope[UserResponse])
def me(user: User = Depends(get_current_user)):
    return ok(_user_to_response(user))
