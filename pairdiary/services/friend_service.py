"""Friendship lifecycle.

    pending  --accept-->  accepted   (creates a two-person pair)
    pending  --reject-->  (deleted)
    accepted --remove-->  (deleted)  (the pair and its diaries stay)

There is at most one friendship row per unordered pair of users; the
``user_pair_key`` unique index backs that up when two requests race.
"""

import logging

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, and_, col, or_, select

from pairdiary.errors import ConflictError, NotFoundError, ValidationError
from pairdiary.models.pair import (
    FRIENDSHIP_TRANSITIONS,
    Friendship,
    FriendshipStatus,
    Pair,
    user_pair_key,
)
from pairdiary.models.user import User
from pairdiary.services.identity_service import get_by_account_id, users_by_id
from pairdiary.services.pair_service import commit_with_fresh_code

logger = logging.getLogger(__name__)


def check_transition(current: FriendshipStatus, target: FriendshipStatus) -> None:
    if (current, target) not in FRIENDSHIP_TRANSITIONS:
        raise ConflictError(f"A {current.value} friendship cannot become {target.value}")


def find_between(user_a: str, user_b: str, session: Session) -> Friendship | None:
    """The friendship row between two users, whichever of them sent the request."""
    return session.exec(
        select(Friendship).where(
            or_(
                and_(Friendship.requester_id == user_a, Friendship.receiver_id == user_b),
                and_(Friendship.requester_id == user_b, Friendship.receiver_id == user_a),
            )
        )
    ).first()


def search_user(account_id: str, requester_id: str, session: Session) -> tuple[User, Friendship | None]:
    user = get_by_account_id(account_id, session)
    if user.id == requester_id:
        raise ValidationError("You cannot search for yourself")
    return user, find_between(requester_id, user.id, session)


def _existing_friendship_error(existing: Friendship) -> ConflictError:
    if existing.status == FriendshipStatus.ACCEPTED:
        return ConflictError("You are already friends")
    return ConflictError("A friend request already exists")


def send_request(requester_id: str, receiver_id: str | None, session: Session) -> Friendship:
    if not receiver_id:
        raise ValidationError("No user specified")
    if receiver_id == requester_id:
        raise ValidationError("You cannot send a friend request to yourself")
    if not session.get(User, receiver_id):
        raise NotFoundError("User not found")

    existing = find_between(requester_id, receiver_id, session)
    if existing:
        raise _existing_friendship_error(existing)

    friendship = Friendship(
        requester_id=requester_id,
        receiver_id=receiver_id,
        user_pair_key=user_pair_key(requester_id, receiver_id),
    )
    session.add(friendship)
    try:
        session.commit()
    except IntegrityError:
        # Lost a race against a request between the same two users
        session.rollback()
        existing = find_between(requester_id, receiver_id, session)
        if existing:
            raise _existing_friendship_error(existing)
        raise ConflictError("A friend request already exists")

    session.refresh(friendship)
    logger.info("User %s sent friend request %s to %s", requester_id, friendship.id, receiver_id)
    return friendship


def _pending_for_receiver(friendship_id: str, user_id: str, session: Session) -> Friendship:
    friendship = session.get(Friendship, friendship_id)
    if (
        not friendship
        or friendship.receiver_id != user_id
        or friendship.status != FriendshipStatus.PENDING
    ):
        raise NotFoundError("Friend request not found")
    return friendship


def accept(friendship_id: str, user_id: str, session: Session) -> Pair:
    """Accept a pending request and open the shared pair, in one transaction."""
    friendship = _pending_for_receiver(friendship_id, user_id, session)
    check_transition(friendship.status, FriendshipStatus.ACCEPTED)
    requester_id, receiver_id = friendship.requester_id, friendship.receiver_id

    def stage(code: str) -> Pair:
        pair = Pair(user1_id=requester_id, user2_id=receiver_id, invite_code=code)
        session.add(pair)
        session.flush()
        result = session.connection().execute(
            update(Friendship)
            .where(
                col(Friendship.id) == friendship_id,
                col(Friendship.status) == FriendshipStatus.PENDING,
            )
            .values(status=FriendshipStatus.ACCEPTED, pair_id=pair.id)
        )
        if result.rowcount != 1:
            raise NotFoundError("Friend request not found")
        return pair

    pair = commit_with_fresh_code(session, stage)
    session.refresh(pair)
    logger.info("User %s accepted friend request %s, opened pair %s", user_id, friendship_id, pair.id)
    return pair


def _delete_in_state(friendship_id: str, status: FriendshipStatus, session: Session) -> bool:
    result = session.connection().execute(
        delete(Friendship).where(
            col(Friendship.id) == friendship_id,
            col(Friendship.status) == status,
        )
    )
    return result.rowcount == 1


def reject(friendship_id: str, user_id: str, session: Session) -> None:
    friendship = _pending_for_receiver(friendship_id, user_id, session)
    check_transition(friendship.status, FriendshipStatus.DELETED)

    if not _delete_in_state(friendship_id, FriendshipStatus.PENDING, session):
        session.rollback()
        raise NotFoundError("Friend request not found")
    session.commit()
    logger.info("User %s rejected friend request %s", user_id, friendship_id)


def remove(friendship_id: str, user_id: str, session: Session) -> None:
    """Unfriend. The pair opened on acceptance, and its diaries, are kept."""
    friendship = session.get(Friendship, friendship_id)
    if (
        not friendship
        or not friendship.involves(user_id)
        or friendship.status != FriendshipStatus.ACCEPTED
    ):
        raise NotFoundError("Friendship not found")
    check_transition(friendship.status, FriendshipStatus.DELETED)

    if not _delete_in_state(friendship_id, FriendshipStatus.ACCEPTED, session):
        session.rollback()
        raise NotFoundError("Friendship not found")
    session.commit()
    logger.info("User %s removed friendship %s", user_id, friendship_id)


def list_friends(user_id: str, session: Session) -> list[tuple[Friendship, User]]:
    """Accepted friendships, each paired with the other party. Newest first."""
    friendships = session.exec(
        select(Friendship)
        .where(
            or_(Friendship.requester_id == user_id, Friendship.receiver_id == user_id),
            Friendship.status == FriendshipStatus.ACCEPTED,
        )
        .order_by(col(Friendship.created_at).desc())
    ).all()
    users = users_by_id({f.other_party(user_id) for f in friendships}, session)
    return [(f, users[f.other_party(user_id)]) for f in friendships]


def list_pending_requests(user_id: str, session: Session) -> list[tuple[Friendship, User]]:
    """Requests waiting on ``user_id``, with the requester. Newest first."""
    friendships = session.exec(
        select(Friendship)
        .where(
            Friendship.receiver_id == user_id,
            Friendship.status == FriendshipStatus.PENDING,
        )
        .order_by(col(Friendship.created_at).desc())
    ).all()
    users = users_by_id({f.requester_id for f in friendships}, session)
    return [(f, users[f.requester_id]) for f in friendships]


def list_sent_requests(user_id: str, session: Session) -> list[tuple[Friendship, User]]:
    friendships = session.exec(
        select(Friendship)
        .where(
            Friendship.requester_id == user_id,
            Friendship.status == FriendshipStatus.PENDING,
        )
        .order_by(col(Friendship.created_at).desc())
    ).all()
    users = users_by_id({f.receiver_id for f in friendships}, session)
    return [(f, users[f.receiver_id]) for f in friendships]
