"""Pair lifecycle: invite codes, joining, listing, deletion."""

import logging
from typing import Callable, TypeVar

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, or_, select

from pairdiary.config import settings
from pairdiary.errors import (
    AppError,
    ConflictError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from pairdiary.models.diary import Diary
from pairdiary.models.pair import Friendship, Pair
from pairdiary.services import access
from pairdiary.utils.security import generate_invite_code

logger = logging.getLogger(__name__)

T = TypeVar("T")


def commit_with_fresh_code(session: Session, stage: Callable[[str], T]) -> T:
    """Stage rows needing a new invite code and commit, retrying on code collisions.

    ``stage`` receives a freshly generated code, adds whatever it needs to
    the session and flushes. A unique-constraint failure rolls back and
    starts over with a new code; after ``unique_code_max_attempts``
    failures the caller gets InternalError.
    """
    for attempt in range(1, settings.unique_code_max_attempts + 1):
        try:
            result = stage(generate_invite_code())
            session.commit()
            return result
        except IntegrityError:
            session.rollback()
            logger.warning("Invite code collision on attempt %d, retrying", attempt)
        except AppError:
            session.rollback()
            raise

    logger.error("Could not allocate a unique invite code after %d attempts", settings.unique_code_max_attempts)
    raise InternalError("Could not generate an invite code")


def create_pair(user_id: str, session: Session) -> Pair:
    """Open a new pair with ``user_id`` in the first seat and a fresh invite code."""

    def stage(code: str) -> Pair:
        pair = Pair(user1_id=user_id, invite_code=code)
        session.add(pair)
        session.flush()
        return pair

    pair = commit_with_fresh_code(session, stage)
    session.refresh(pair)
    logger.info("User %s opened pair %s", user_id, pair.id)
    return pair


def claim_second_seat(pair_id: str, user_id: str, session: Session) -> bool:
    """Set user2_id only if the seat is still empty. Returns False if someone got there first."""
    result = session.connection().execute(
        update(Pair)
        .where(
            col(Pair.id) == pair_id,
            Pair.user2_id == None,  # noqa: E711
            Pair.is_solo == False,  # noqa: E712
        )
        .values(user2_id=user_id)
    )
    return result.rowcount == 1


def join_pair(user_id: str, invite_code: str | None, session: Session) -> Pair:
    code = (invite_code or "").strip().upper()
    if not code:
        raise ValidationError("Invite code is required")

    pair = session.exec(select(Pair).where(Pair.invite_code == code)).first()
    if not pair:
        raise NotFoundError("Invalid invite code")
    if pair.is_solo or pair.user2_id is not None:
        raise ConflictError("This invite code has already been used")
    if pair.user1_id == user_id:
        raise ValidationError("You cannot join a pair you created")

    if not claim_second_seat(pair.id, user_id, session):
        session.rollback()
        raise ConflictError("This invite code has already been used")

    session.commit()
    session.refresh(pair)
    logger.info("User %s joined pair %s", user_id, pair.id)
    return pair


def get_pair_for_member(pair_id: str, user_id: str, session: Session) -> Pair:
    pair = session.get(Pair, pair_id)
    if not pair:
        raise NotFoundError("Pair not found")
    access.is_member(pair, user_id).enforce()
    return pair


def list_pairs(user_id: str, session: Session) -> list[Pair]:
    """All pairs the user sits in: solo room first, then newest first."""
    return list(
        session.exec(
            select(Pair)
            .where(or_(Pair.user1_id == user_id, Pair.user2_id == user_id))
            .order_by(col(Pair.is_solo).desc(), col(Pair.created_at).desc())
        ).all()
    )


def delete_pair(pair_id: str, user_id: str, session: Session) -> None:
    """Delete a pair and, explicitly, every diary written in it.

    Friendships that pointed at the pair survive with their pair_id cleared.
    The solo room cannot be deleted.
    """
    pair = session.get(Pair, pair_id)
    if not pair:
        raise NotFoundError("Pair not found")
    if not pair.has_member(user_id):
        raise ForbiddenError("You are not a member of this pair")
    if pair.is_solo:
        raise ValidationError("Your own room cannot be deleted")

    conn = session.connection()
    removed = conn.execute(delete(Diary).where(col(Diary.pair_id) == pair_id)).rowcount
    conn.execute(
        update(Friendship).where(col(Friendship.pair_id) == pair_id).values(pair_id=None)
    )
    session.delete(pair)
    session.commit()
    logger.info("User %s deleted pair %s with %d diaries", user_id, pair_id, removed)
