"""Public diaries: entries published under a user's account page."""

import logging
from datetime import datetime
from typing import Any, Optional

from sqlmodel import Session, col, select

from pairdiary.errors import NotFoundError
from pairdiary.models.diary import PublicDiary
from pairdiary.models.user import User
from pairdiary.services import access
from pairdiary.services.diary_service import clean_title
from pairdiary.services.identity_service import get_by_account_id
from pairdiary.utils.dates import as_utc, utc_now

logger = logging.getLogger(__name__)


def list_for_account(account_id: str, session: Session) -> tuple[User, list[PublicDiary]]:
    """Published entries on an account page, newest first. No login needed."""
    author = get_by_account_id(account_id, session)
    diaries = session.exec(
        select(PublicDiary)
        .where(PublicDiary.author_id == author.id, PublicDiary.is_draft == False)  # noqa: E712
        .order_by(col(PublicDiary.created_at).desc())
    ).all()
    return author, list(diaries)


def list_own(author_id: str, session: Session) -> list[PublicDiary]:
    """All of the author's public entries, drafts included."""
    return list(
        session.exec(
            select(PublicDiary)
            .where(PublicDiary.author_id == author_id)
            .order_by(col(PublicDiary.created_at).desc())
        ).all()
    )


def get_for_account(
    account_id: str, diary_id: str, reader_id: Optional[str], session: Session
) -> tuple[User, PublicDiary]:
    author = get_by_account_id(account_id, session)
    diary = session.get(PublicDiary, diary_id)
    if not diary or diary.author_id != author.id:
        raise NotFoundError("Diary not found")
    access.can_read_public_diary(diary, reader_id).enforce()
    return author, diary


def _load(diary_id: str, session: Session) -> PublicDiary:
    diary = session.get(PublicDiary, diary_id)
    if not diary:
        raise NotFoundError("Diary not found")
    return diary


def create(
    author_id: str,
    title: Optional[str],
    content: Optional[str],
    is_draft: bool,
    created_at: Optional[datetime],
    session: Session,
) -> PublicDiary:
    clean = clean_title(title)
    now = utc_now()
    diary = PublicDiary(
        author_id=author_id,
        title=clean,
        content=content or "",
        is_draft=bool(is_draft),
        created_at=as_utc(created_at) if created_at else now,
        updated_at=now,
    )
    session.add(diary)
    session.commit()
    session.refresh(diary)
    logger.info("User %s wrote public diary %s", author_id, diary.id)
    return diary


def update(diary_id: str, author_id: str, changes: dict[str, Any], session: Session) -> PublicDiary:
    diary = _load(diary_id, session)
    access.can_write_diary(diary, author_id).enforce()

    if "title" in changes:
        diary.title = clean_title(changes["title"])
    if changes.get("content") is not None:
        diary.content = changes["content"]
    if changes.get("is_draft") is not None:
        diary.is_draft = bool(changes["is_draft"])
    if changes.get("created_at") is not None:
        diary.created_at = as_utc(changes["created_at"])
    diary.updated_at = utc_now()

    session.add(diary)
    session.commit()
    session.refresh(diary)
    return diary


def delete(diary_id: str, author_id: str, session: Session) -> None:
    diary = _load(diary_id, session)
    access.can_write_diary(diary, author_id).enforce()
    session.delete(diary)
    session.commit()
    logger.info("User %s deleted public diary %s", author_id, diary_id)
