"""Pair request/response schemas."""

from typing import Optional

from pydantic import BaseModel


class PairCreateResponse(BaseModel):
    pair_id: str
    invite_code: str


class PairJoinRequest(BaseModel):
    invite_code: Optional[str] = None


class PairJoinResponse(BaseModel):
    pair_id: str


class PairSummary(BaseModel):
    id: str
    is_solo: bool
    status: str  # 'solo' | 'pending' | 'paired'
    partner_id: Optional[str]
    partner_username: Optional[str]
    created_at: str


class PairListResponse(BaseModel):
    pairs: list[PairSummary]


class PairDetailResponse(PairSummary):
    user1_id: str
    user2_id: Optional[str]
    invite_code: Optional[str]  # only while the second seat is open
