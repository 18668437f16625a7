"""Session lifecycle: opaque bearer tokens mapped to a user id.

The token handed to the client is never stored; the store keys rows by
its sha256 fingerprint. Every session has a server-side expiry that is
checked on each resolve, independent of what the client's cookie says.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta

from sqlalchemy import delete
from sqlmodel import Session, select

from pairdiary.config import settings
from pairdiary.models.user import AuthSession
from pairdiary.utils.dates import as_utc, utc_now
from pairdiary.utils.security import generate_session_token, hash_token, is_well_formed_session_token

logger = logging.getLogger(__name__)


class SessionStore(ABC):
    """Durable keyed storage for sessions."""

    @abstractmethod
    def save(self, token_hash: str, user_id: str, expires_at: datetime) -> None: ...

    @abstractmethod
    def load(self, token_hash: str) -> AuthSession | None: ...

    @abstractmethod
    def delete(self, token_hash: str) -> None: ...

    @abstractmethod
    def delete_for_user(self, user_id: str) -> int: ...

    @abstractmethod
    def purge_expired(self, now: datetime) -> int: ...


class DatabaseSessionStore(SessionStore):
    """SessionStore backed by the ``sessions`` table."""

    def __init__(self, session: Session):
        self.session = session

    def save(self, token_hash: str, user_id: str, expires_at: datetime) -> None:
        self.session.add(AuthSession(token_hash=token_hash, user_id=user_id, expires_at=expires_at))
        self.session.commit()

    def load(self, token_hash: str) -> AuthSession | None:
        return self.session.exec(
            select(AuthSession).where(AuthSession.token_hash == token_hash)
        ).first()

    def delete(self, token_hash: str) -> None:
        self.session.connection().execute(
            delete(AuthSession).where(AuthSession.token_hash == token_hash)
        )
        self.session.commit()

    def delete_for_user(self, user_id: str) -> int:
        result = self.session.connection().execute(
            delete(AuthSession).where(AuthSession.user_id == user_id)
        )
        self.session.commit()
        return result.rowcount

    def purge_expired(self, now: datetime) -> int:
        result = self.session.connection().execute(
            delete(AuthSession).where(AuthSession.expires_at <= as_utc(now))
        )
        self.session.commit()
        return result.rowcount


class SessionManager:
    def __init__(self, store: SessionStore, max_age_seconds: int | None = None):
        self.store = store
        self.max_age = timedelta(
            seconds=max_age_seconds if max_age_seconds is not None else settings.session_max_age_seconds
        )

    def create(self, user_id: str) -> str:
        """Start a session for ``user_id`` and return the bearer token."""
        token = generate_session_token()
        expires_at = utc_now() + self.max_age
        self.store.save(hash_token(token), user_id, expires_at)
        return token

    def resolve(self, token: str | None) -> str | None:
        """Return the user id behind ``token``, or None if it is not a live session."""
        if not is_well_formed_session_token(token):
            return None

        token_hash = hash_token(token)
        record = self.store.load(token_hash)
        if record is None:
            return None

        if as_utc(record.expires_at) <= utc_now():
            logger.info("Session for user %s expired", record.user_id)
            self.store.delete(token_hash)
            return None
        return record.user_id

    def destroy(self, token: str | None) -> None:
        if not is_well_formed_session_token(token):
            return
        self.store.delete(hash_token(token))

    def destroy_all(self, user_id: str) -> int:
        return self.store.delete_for_user(user_id)

    def purge_expired(self) -> int:
        """Drop every expired session. Maintenance task, not on the request path."""
        removed = self.store.purge_expired(utc_now())
        logger.info("Purged %d expired session(s)", removed)
        return removed


def session_manager_for(session: Session) -> SessionManager:
    return SessionManager(DatabaseSessionStore(session))
