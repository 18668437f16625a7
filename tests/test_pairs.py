"""Invite-code pairs: create, join, list, delete."""

import pytest
from sqlmodel import Session, select

from pairdiary.database import engine
from pairdiary.errors import (
    ConflictError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from pairdiary.models.diary import Diary
from pairdiary.models.pair import Friendship, Pair
from pairdiary.services import diary_service, friend_service, pair_service


def test_create_pair_is_half_open(session, alice):
    pair = pair_service.create_pair(alice.id, session)
    assert pair.user1_id == alice.id
    assert pair.user2_id is None
    assert not pair.is_solo
    assert pair.status == "pending"
    assert len(pair.invite_code) == 8
    assert pair.invite_code == pair.invite_code.upper()


def test_invite_code_is_single_use(session, alice, bob, carol):
    pair = pair_service.create_pair(alice.id, session)
    code = pair.invite_code

    joined = pair_service.join_pair(bob.id, code, session)
    assert joined.id == pair.id
    assert joined.user2_id == bob.id
    assert joined.status == "paired"

    with pytest.raises(ConflictError):
        pair_service.join_pair(carol.id, code, session)
    with pytest.raises(ConflictError):
        pair_service.join_pair(bob.id, code, session)


def test_join_is_case_insensitive(session, alice, bob):
    pair = pair_service.create_pair(alice.id, session)
    joined = pair_service.join_pair(bob.id, f"  {pair.invite_code.lower()} ", session)
    assert joined.user2_id == bob.id


def test_cannot_join_own_pair(session, alice):
    pair = pair_service.create_pair(alice.id, session)
    with pytest.raises(ValidationError):
        pair_service.join_pair(alice.id, pair.invite_code, session)


def test_join_unknown_or_missing_code(session, alice):
    with pytest.raises(NotFoundError):
        pair_service.join_pair(alice.id, "DEADBEEF", session)
    with pytest.raises(ValidationError):
        pair_service.join_pair(alice.id, "", session)


def test_seat_claim_is_conditional(session, alice, bob, carol):
    """A joiner who read the pair before someone else claimed the seat loses."""
    pair = pair_service.create_pair(alice.id, session)
    pair_id, code = pair.id, pair.invite_code

    with Session(engine) as other:
        pair_service.join_pair(bob.id, code, other)

    assert pair_service.claim_second_seat(pair_id, carol.id, session) is False
    session.rollback()
    assert session.get(Pair, pair_id).user2_id == bob.id


def test_invite_code_collision_is_retried(session, alice, bob, monkeypatch):
    first = pair_service.create_pair(alice.id, session)
    codes = iter([first.invite_code, "C0FFEE00"])
    monkeypatch.setattr(pair_service, "generate_invite_code", lambda: next(codes))

    second = pair_service.create_pair(bob.id, session)
    assert second.invite_code == "C0FFEE00"


def test_invite_code_retries_exhausted(session, alice, bob, monkeypatch):
    first = pair_service.create_pair(alice.id, session)
    code = first.invite_code
    monkeypatch.setattr(pair_service, "generate_invite_code", lambda: code)

    with pytest.raises(InternalError):
        pair_service.create_pair(bob.id, session)
    assert len(pair_service.list_pairs(bob.id, session)) == 1  # just the solo room


def test_list_pairs_solo_first(session, alice, bob):
    opened = pair_service.create_pair(alice.id, session)
    pair_service.join_pair(bob.id, opened.invite_code, session)
    pending = pair_service.create_pair(alice.id, session)

    pairs = pair_service.list_pairs(alice.id, session)
    assert [p.status for p in pairs][0] == "solo"
    assert {p.id for p in pairs[1:]} == {opened.id, pending.id}
    assert opened.partner_of(alice.id) == bob.id
    assert pairs[0].partner_of(alice.id) is None


def test_get_pair_for_member(session, alice, bob, carol):
    pair = pair_service.create_pair(alice.id, session)
    pair_service.join_pair(bob.id, pair.invite_code, session)

    assert pair_service.get_pair_for_member(pair.id, bob.id, session).id == pair.id
    with pytest.raises(ForbiddenError):
        pair_service.get_pair_for_member(pair.id, carol.id, session)
    with pytest.raises(NotFoundError):
        pair_service.get_pair_for_member("pair_missing", alice.id, session)


def test_delete_pair_removes_its_diaries(session, alice, bob):
    pair = pair_service.create_pair(alice.id, session)
    pair_service.join_pair(bob.id, pair.invite_code, session)
    diary_service.create_diary(pair.id, alice.id, "Day 1", "", False, None, session)
    pair_id = pair.id

    pair_service.delete_pair(pair_id, bob.id, session)

    assert session.get(Pair, pair_id) is None
    assert session.exec(select(Diary).where(Diary.pair_id == pair_id)).all() == []


def test_delete_pair_keeps_friendship(session, alice, bob):
    request = friend_service.send_request(alice.id, bob.id, session)
    pair = friend_service.accept(request.id, bob.id, session)
    pair_id, friendship_id = pair.id, request.id

    pair_service.delete_pair(pair_id, alice.id, session)

    friendship = session.get(Friendship, friendship_id)
    assert friendship is not None
    assert friendship.pair_id is None


def test_delete_pair_rules(session, alice, carol):
    pair = pair_service.create_pair(alice.id, session)
    solo = pair_service.list_pairs(alice.id, session)[0]

    with pytest.raises(ForbiddenError):
        pair_service.delete_pair(pair.id, carol.id, session)
    with pytest.raises(ValidationError):
        pair_service.delete_pair(solo.id, alice.id, session)
    with pytest.raises(NotFoundError):
        pair_service.delete_pair("pair_missing", alice.id, session)
