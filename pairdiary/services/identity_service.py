"""Registration, credential checks, and user lookup."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from pairdiary.config import settings
from pairdiary.errors import AuthError, ConflictError, InternalError, NotFoundError, ValidationError
from pairdiary.models.pair import Pair
from pairdiary.models.user import User
from pairdiary.utils.security import (
    DUMMY_PASSWORD_HASH,
    generate_account_id,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"


def _clean_username(username: str | None) -> str:
    name = (username or "").strip()
    if not name:
        raise ValidationError("Username is required")
    if len(name) > settings.username_max_length:
        raise ValidationError(f"Username must be at most {settings.username_max_length} characters")
    return name


def _password_too_long(password: str) -> bool:
    return len(password.encode()) > settings.password_max_bytes


def _username_taken(username: str, session: Session) -> bool:
    return session.exec(select(User.id).where(User.username == username)).first() is not None


def register(username: str | None, password: str | None, session: Session) -> User:
    """Create a user together with their solo room.

    The account_id is drawn at random; a collision on its unique index is
    retried with a fresh value, a collision on the username is reported
    as ConflictError.
    """
    name = _clean_username(username)
    if not password or len(password) < settings.password_min_length:
        raise ValidationError(f"Password must be at least {settings.password_min_length} characters")
    if _password_too_long(password):
        raise ValidationError(f"Password must be at most {settings.password_max_bytes} bytes")

    if _username_taken(name, session):
        raise ConflictError("This username is already taken")

    password_hash = hash_password(password)

    for attempt in range(1, settings.unique_code_max_attempts + 1):
        user = User(username=name, account_id=generate_account_id(), password_hash=password_hash)
        try:
            session.add(user)
            session.flush()
            session.add(Pair(user1_id=user.id, is_solo=True))
            session.commit()
        except IntegrityError:
            session.rollback()
            if _username_taken(name, session):
                raise ConflictError("This username is already taken")
            logger.warning("account_id collision on attempt %d, retrying", attempt)
            continue

        session.refresh(user)
        logger.info("Registered user %s (%s)", user.id, user.account_id)
        return user

    logger.error("Could not allocate a unique account_id after %d attempts", settings.unique_code_max_attempts)
    raise InternalError()


def authenticate(username: str | None, password: str | None, session: Session) -> User:
    """Check credentials. Never reveals whether the username exists."""
    user = None
    if username:
        user = session.exec(select(User).where(User.username == username.strip())).first()

    candidate = password or ""
    # No stored password is this long; check an empty one so the bcrypt cost is still paid
    too_long = _password_too_long(candidate)
    if too_long:
        candidate = ""

    hashed = user.password_hash if user else DUMMY_PASSWORD_HASH
    if not verify_password(candidate, hashed) or user is None or too_long:
        logger.warning("Failed login attempt for username %r", username)
        raise AuthError(INVALID_CREDENTIALS)
    return user


def get_by_id(user_id: str, session: Session) -> User:
    user = session.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def get_by_account_id(account_id: str, session: Session) -> User:
    user = session.exec(select(User).where(User.account_id == account_id)).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def users_by_id(user_ids: set[str], session: Session) -> dict[str, User]:
    """Load several users in one query, keyed by id."""
    if not user_ids:
        return {}
    users = session.exec(select(User).where(col(User.id).in_(user_ids))).all()
    return {u.id: u for u in users}
