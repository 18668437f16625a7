"""Friend request/response schemas."""

from typing import Optional

from pydantic import BaseModel


class FriendRequestCreate(BaseModel):
    receiver_id: Optional[str] = None


class FriendRequestCreated(BaseModel):
    id: str


class FriendResponse(BaseModel):
    friendship_id: str
    friend_id: str
    friend_username: str
    friend_account_id: str
    pair_id: Optional[str]
    created_at: str


class FriendListResponse(BaseModel):
    friends: list[FriendResponse]


class FriendRequestResponse(BaseModel):
    id: str
    requester_id: str
    username: str
    account_id: str
    created_at: str


class FriendRequestListResponse(BaseModel):
    requests: list[FriendRequestResponse]


class SentRequestResponse(BaseModel):
    id: str
    receiver_id: str
    username: str
    account_id: str
    created_at: str


class SentRequestListResponse(BaseModel):
    requests: list[SentRequestResponse]


class SearchUser(BaseModel):
    id: str
    username: str
    account_id: str


class FriendshipSummary(BaseModel):
    id: str
    status: str


class UserSearchResponse(BaseModel):
    user: SearchUser
    friendship: Optional[FriendshipSummary]


class AcceptResponse(BaseModel):
    pair_id: str
