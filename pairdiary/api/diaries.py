"""Pair diary endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from pairdiary.api.deps import get_current_user
from pairdiary.database import get_session
from pairdiary.models.diary import Diary
from pairdiary.models.user import User
from pairdiary.schemas.common import Envelope, ok
from pairdiary.schemas.diary import (
    CalendarResponse,
    DiaryCreateRequest,
    DiaryListResponse,
    DiaryResponse,
    DiaryUpdateRequest,
    DraftListResponse,
)
from pairdiary.services import diary_service
from pairdiary.services.identity_service import users_by_id

router = APIRouter(prefix="/diaries", tags=["diaries"])


def _diary_to_response(diary: Diary, users: dict[str, User]) -> DiaryResponse:
    author = users.get(diary.author_id)
    return DiaryResponse(
        id=diary.id,
        pair_id=diary.pair_id,
        author_id=diary.author_id,
        author_username=author.username if author else None,
        title=diary.title,
        content=diary.content,
        is_draft=diary.is_draft,
        created_at=diary.created_at.isoformat(),
        updated_at=diary.updated_at.isoformat(),
    )


def _diaries_to_response(diaries: list[Diary], session: Session) -> list[DiaryResponse]:
    users = users_by_id({d.author_id for d in diaries}, session)
    return [_diary_to_response(d, users) for d in diaries]


@router.get("/{pair_id}/calendar/{year}/{month}", response_model=Envelope[CalendarResponse])
def calendar(
    pair_id: str,
    year: int,
    month: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Days of the month that have at least one entry visible to the caller."""
    days = diary_service.days_with_entries(pair_id, year, month, user.id, session)
    return ok(CalendarResponse(days=days))


@router.get("/{pair_id}", response_model=Envelope[DiaryListResponse])
def list_diaries(
    pair_id: str,
    order: Optional[str] = Query(default="desc"),
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    diaries = diary_service.list_published(pair_id, user.id, order, session)
    return ok(DiaryListResponse(diaries=_diaries_to_response(diaries, session)))


@router.get("/{pair_id}/drafts", response_model=Envelope[DraftListResponse])
def list_drafts(
    pair_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    drafts = diary_service.list_drafts(pair_id, user.id, session)
    return ok(DraftListResponse(drafts=_diaries_to_response(drafts, session)))


@router.get("/{pair_id}/{diary_id}", response_model=Envelope[DiaryResponse])
def get_diary(
    pair_id: str,
    diary_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    diary = diary_service.get_diary(pair_id, diary_id, user.id, session)
    return ok(_diaries_to_response([diary], session)[0])


@router.post("/{pair_id}", response_model=Envelope[DiaryResponse])
def create_diary(
    pair_id: str,
    request: DiaryCreateRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    diary = diary_service.create_diary(
        pair_id,
        user.id,
        request.title,
        request.content,
        request.is_draft,
        request.created_at,
        session,
    )
    return ok(_diary_to_response(diary, {user.id: user}))


@router.put("/{pair_id}/{diary_id}", response_model=Envelope[DiaryResponse])
def update_diary(
    pair_id: str,
    diary_id: str,
    request: DiaryUpdateRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Change title, content, draft flag or entry date. Author only."""
    diary = diary_service.update_diary(
        pair_id, diary_id, user.id, request.model_dump(exclude_unset=True), session
    )
    return ok(_diary_to_response(diary, {user.id: user}))


@router.delete("/{pair_id}/{diary_id}", response_model=Envelope[None])
def delete_diary(
    pair_id: str,
    diary_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    diary_service.delete_diary(pair_id, diary_id, user.id, session)
    return ok()
