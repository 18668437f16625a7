"""Friend search, requests, and the friend list."""

from fastapi import APIRouter, Depends
from sqlmodel import Session

from pairdiary.api.deps import get_current_user
from pairdiary.database import get_session
from pairdiary.models.user import User
from pairdiary.schemas.common import Envelope, ok
from pairdiary.schemas.friend import (
    AcceptResponse,
    FriendListResponse,
    FriendRequestCreate,
    FriendRequestCreated,
    FriendRequestListResponse,
    FriendRequestResponse,
    FriendResponse,
    FriendshipSummary,
    SearchUser,
    SentRequestListResponse,
    SentRequestResponse,
    UserSearchResponse,
)
from pairdiary.services import friend_service

router = APIRouter(prefix="/friends", tags=["friends"])


@router.get("", response_model=Envelope[FriendListResponse])
def list_friends(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    rows = friend_service.list_friends(user.id, session)
    return ok(
        FriendListResponse(
            friends=[
                FriendResponse(
                    friendship_id=f.id,
                    friend_id=friend.id,
                    friend_username=friend.username,
                    friend_account_id=friend.account_id,
                    pair_id=f.pair_id,
                    created_at=f.created_at.isoformat(),
                )
                for f, friend in rows
            ]
        )
    )


@router.get("/requests", response_model=Envelope[FriendRequestListResponse])
def list_requests(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Pending requests sent to the current user."""
    rows = friend_service.list_pending_requests(user.id, session)
    return ok(
        FriendRequestListResponse(
            requests=[
                FriendRequestResponse(
                    id=f.id,
                    requester_id=requester.id,
                    username=requester.username,
                    account_id=requester.account_id,
                    created_at=f.created_at.isoformat(),
                )
                for f, requester in rows
            ]
        )
    )


@router.get("/requests/sent", response_model=Envelope[SentRequestListResponse])
def list_sent_requests(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    rows = friend_service.list_sent_requests(user.id, session)
    return ok(
        SentRequestListResponse(
            requests=[
                SentRequestResponse(
                    id=f.id,
                    receiver_id=receiver.id,
                    username=receiver.username,
                    account_id=receiver.account_id,
                    created_at=f.created_at.isoformat(),
                )
                for f, receiver in rows
            ]
        )
    )


@router.get("/search/{account_id}", response_model=Envelope[UserSearchResponse])
def search(
    account_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Look a user up by account_id, along with any friendship already between you."""
    found, friendship = friend_service.search_user(account_id, user.id, session)
    return ok(
        UserSearchResponse(
            user=SearchUser(id=found.id, username=found.username, account_id=found.account_id),
            friendship=FriendshipSummary(id=friendship.id, status=friendship.status.value) if friendship else None,
        )
    )


@router.post("/request", response_model=Envelope[FriendRequestCreated])
def send_request(
    request: FriendRequestCreate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    friendship = friend_service.send_request(user.id, request.receiver_id, session)
    return ok(FriendRequestCreated(id=friendship.id))


@router.post("/accept/{friendship_id}", response_model=Envelope[AcceptResponse])
def accept(
    friendship_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Accept a request. This opens a shared pair for the two of you."""
    pair = friend_service.accept(friendship_id, user.id, session)
    return ok(AcceptResponse(pair_id=pair.id))


@router.post("/reject/{friendship_id}", response_model=Envelope[None])
def reject(
    friendship_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    friend_service.reject(friendship_id, user.id, session)
    return ok()


@router.delete("/{friendship_id}", response_model=Envelope[None])
def remove(
    friendship_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Unfriend. The shared pair and its diaries are kept."""
    friend_service.remove(friendship_id, user.id, session)
    return ok()
