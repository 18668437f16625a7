"""Diary and public diary schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class DiaryCreateRequest(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    is_draft: bool = False
    created_at: Optional[datetime] = None


class DiaryUpdateRequest(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    is_draft: Optional[bool] = None
    created_at: Optional[datetime] = None


class DiaryResponse(BaseModel):
    id: str
    pair_id: str
    author_id: str
    author_username: Optional[str]
    title: str
    content: str
    is_draft: bool
    created_at: str
    updated_at: str


class DiaryListResponse(BaseModel):
    diaries: list[DiaryResponse]


class DraftListResponse(BaseModel):
    drafts: list[DiaryResponse]


class CalendarResponse(BaseModel):
    days: list[int]


class PublicDiaryResponse(BaseModel):
    id: str
    author_id: str
    title: str
    content: str
    is_draft: bool
    created_at: str
    updated_at: str
    author_username: Optional[str] = None
    author_account_id: Optional[str] = None


class PublicDiaryListResponse(BaseModel):
    diaries: list[PublicDiaryResponse]


class AccountSummary(BaseModel):
    username: str
    account_id: str


class AccountDiariesResponse(BaseModel):
    user: AccountSummary
    diaries: list[PublicDiaryResponse]
