"""Public diary endpoints. Reading needs no login; writing does."""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from pairdiary.api.deps import get_current_user, get_optional_user
from pairdiary.database import get_session
from pairdiary.models.diary import PublicDiary
from pairdiary.models.user import User
from pairdiary.schemas.common import Envelope, ok
from pairdiary.schemas.diary import (
    AccountDiariesResponse,
    AccountSummary,
    DiaryCreateRequest,
    DiaryUpdateRequest,
    PublicDiaryListResponse,
    PublicDiaryResponse,
)
from pairdiary.services import public_diary_service

router = APIRouter(prefix="/public-diaries", tags=["public-diaries"])


def _public_to_response(diary: PublicDiary, author: Optional[User] = None) -> PublicDiaryResponse:
    return PublicDiaryResponse(
        id=diary.id,
        author_id=diary.author_id,
        title=diary.title,
        content=diary.content,
        is_draft=diary.is_draft,
        created_at=diary.created_at.isoformat(),
        updated_at=diary.updated_at.isoformat(),
        author_username=author.username if author else None,
        author_account_id=author.account_id if author else None,
    )


@router.get("", response_model=Envelope[PublicDiaryListResponse])
def list_own(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """The current user's public diaries, drafts included."""
    diaries = public_diary_service.list_own(user.id, session)
    return ok(PublicDiaryListResponse(diaries=[_public_to_response(d, user) for d in diaries]))


@router.post("", response_model=Envelope[PublicDiaryResponse])
def create(
    request: DiaryCreateRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    diary = public_diary_service.create(
        user.id, request.title, request.content, request.is_draft, request.created_at, session
    )
    return ok(_public_to_response(diary, user))


@router.get("/{account_id}", response_model=Envelope[AccountDiariesResponse])
def list_for_account(account_id: str, session: Session = Depends(get_session)):
    author, diaries = public_diary_service.list_for_account(account_id, session)
    return ok(
        AccountDiariesResponse(
            user=AccountSummary(username=author.username, account_id=author.account_id),
            diaries=[_public_to_response(d, author) for d in diaries],
        )
    )


@router.get("/{account_id}/{diary_id}", response_model=Envelope[PublicDiaryResponse])
def get_for_account(
    account_id: str,
    diary_id: str,
    viewer: Optional[User] = Depends(get_optional_user),
    session: Session = Depends(get_session),
):
    """Read one entry. A session is optional and only used to let authors see their drafts."""
    author, diary = public_diary_service.get_for_account(
        account_id, diary_id, viewer.id if viewer else None, session
    )
    return ok(_public_to_response(diary, author))


@router.put("/{diary_id}", response_model=Envelope[PublicDiaryResponse])
def update(
    diary_id: str,
    request: DiaryUpdateRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    diary = public_diary_service.update(diary_id, user.id, request.model_dump(exclude_unset=True), session)
    return ok(_public_to_response(diary, user))


@router.delete("/{diary_id}", response_model=Envelope[None])
def delete(
    diary_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    public_diary_service.delete(diary_id, user.id, session)
    return ok()
