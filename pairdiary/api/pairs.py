"""Pair endpoints: invite codes, joining, listing."""

from fastapi import APIRouter, Depends
from sqlmodel import Session

from pairdiary.api.deps import get_current_user
from pairdiary.database import get_session
from pairdiary.models.pair import Pair
from pairdiary.models.user import User
from pairdiary.schemas.common import Envelope, ok
from pairdiary.schemas.pair import (
    PairCreateResponse,
    PairDetailResponse,
    PairJoinRequest,
    PairJoinResponse,
    PairListResponse,
    PairSummary,
)
from pairdiary.services import pair_service
from pairdiary.services.identity_service import users_by_id

router = APIRouter(prefix="/pairs", tags=["pairs"])


def _pair_to_summary(pair: Pair, user_id: str, users: dict[str, User]) -> PairSummary:
    partner_id = pair.partner_of(user_id)
    partner = users.get(partner_id) if partner_id else None
    return PairSummary(
        id=pair.id,
        is_solo=pair.is_solo,
        status=pair.status,
        partner_id=partner_id,
        partner_username=partner.username if partner else None,
        created_at=pair.created_at.isoformat() if pair.created_at else "",
    )


@router.post("/create", response_model=Envelope[PairCreateResponse])
def create_pair(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Open a pair and get an invite code to hand to the partner."""
    pair = pair_service.create_pair(user.id, session)
    return ok(PairCreateResponse(pair_id=pair.id, invite_code=pair.invite_code))


@router.post("/join", response_model=Envelope[PairJoinResponse])
def join_pair(
    request: PairJoinRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    pair = pair_service.join_pair(user.id, request.invite_code, session)
    return ok(PairJoinResponse(pair_id=pair.id))


@router.get("", response_model=Envelope[PairListResponse])
def list_pairs(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Pairs the current user belongs to, solo room first."""
    pairs = pair_service.list_pairs(user.id, session)
    partner_ids = {pid for pid in (p.partner_of(user.id) for p in pairs) if pid}
    users = users_by_id(partner_ids, session)
    return ok(PairListResponse(pairs=[_pair_to_summary(p, user.id, users) for p in pairs]))


@router.get("/{pair_id}", response_model=Envelope[PairDetailResponse])
def get_pair(
    pair_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    pair = pair_service.get_pair_for_member(pair_id, user.id, session)
    partner_id = pair.partner_of(user.id)
    users = users_by_id({partner_id} if partner_id else set(), session)
    summary = _pair_to_summary(pair, user.id, users)
    return ok(
        PairDetailResponse(
            **summary.model_dump(),
            user1_id=pair.user1_id,
            user2_id=pair.user2_id,
            invite_code=pair.invite_code if pair.status == "pending" else None,
        )
    )


@router.delete("/{pair_id}", response_model=Envelope[None])
def delete_pair(
    pair_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Delete a pair along with every diary written in it."""
    pair_service.delete_pair(pair_id, user.id, session)
    return ok()
