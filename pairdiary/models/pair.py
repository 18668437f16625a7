"""Pair and friendship models."""

import secrets
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field, SQLModel

from pairdiary.utils.dates import utc_now


class Pair(SQLModel, table=True):
    __tablename__ = "pairs"

    id: str = Field(default_factory=lambda: f"pair_{secrets.token_hex(6)}", primary_key=True)
    user1_id: str = Field(foreign_key="users.id", index=True)
    user2_id: Optional[str] = Field(default=None, foreign_key="users.id", index=True)
    invite_code: Optional[str] = Field(default=None, unique=True, index=True)  # None for solo rooms
    is_solo: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)

    def has_member(self, user_id: str) -> bool:
        return user_id == self.user1_id or (self.user2_id is not None and user_id == self.user2_id)

    def partner_of(self, user_id: str) -> Optional[str]:
        if self.is_solo:
            return None
        return self.user2_id if user_id == self.user1_id else self.user1_id

    @property
    def status(self) -> str:
        if self.is_solo:
            return "solo"
        return "paired" if self.user2_id else "pending"


class FriendshipStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DELETED = "deleted"  # terminal; the row is removed, never stored


FRIENDSHIP_TRANSITIONS: set[tuple[FriendshipStatus, FriendshipStatus]] = {
    (FriendshipStatus.PENDING, FriendshipStatus.ACCEPTED),
    (FriendshipStatus.PENDING, FriendshipStatus.DELETED),
    (FriendshipStatus.ACCEPTED, FriendshipStatus.DELETED),
}


def user_pair_key(user_a: str, user_b: str) -> str:
    low, high = sorted((user_a, user_b))
    return f"{low}:{high}"


class Friendship(SQLModel, table=True):
    __tablename__ = "friends"

    id: str = Field(default_factory=lambda: f"frd_{secrets.token_hex(6)}", primary_key=True)
    requester_id: str = Field(foreign_key="users.id", index=True)
    receiver_id: str = Field(foreign_key="users.id", index=True)
    user_pair_key: str = Field(unique=True)  # same value for (a, b) and (b, a)
    status: FriendshipStatus = Field(default=FriendshipStatus.PENDING)
    pair_id: Optional[str] = Field(default=None, foreign_key="pairs.id")
    created_at: datetime = Field(default_factory=utc_now)

    def involves(self, user_id: str) -> bool:
        return user_id in (self.requester_id, self.receiver_id)

    def other_party(self, user_id: str) -> str:
        return self.receiver_id if user_id == self.requester_id else self.requester_id
