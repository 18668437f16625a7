"""Pair diaries: listing, drafts, CRUD, and the calendar projection.

Every operation loads the pair first and runs the rules in
``pairdiary.services.access``; nothing here decides visibility on its own.
"""

import logging
from datetime import datetime
from typing import Any, Optional

from sqlmodel import Session, col, select

from pairdiary.config import settings
from pairdiary.errors import NotFoundError, ValidationError
from pairdiary.models.diary import Diary
from pairdiary.services import access
from pairdiary.services.pair_service import get_pair_for_member
from pairdiary.utils.dates import as_utc, month_bounds, utc_now

logger = logging.getLogger(__name__)


def clean_title(title: Optional[str]) -> str:
    value = (title or "").strip()
    if not value:
        raise ValidationError("Title is required")
    if len(value) > settings.title_max_length:
        raise ValidationError(f"Title must be at most {settings.title_max_length} characters")
    return value


def _order_by(order: Optional[str]):
    created = col(Diary.created_at)
    return created.asc() if order == "asc" else created.desc()


def list_published(pair_id: str, requester_id: str, order: Optional[str], session: Session) -> list[Diary]:
    """Entries a member sees in the pair's timeline.

    Solo rooms skip draft filtering entirely.
    """
    pair = get_pair_for_member(pair_id, requester_id, session)
    query = select(Diary).where(Diary.pair_id == pair.id)
    if access.filters_drafts(pair):
        query = query.where(Diary.is_draft == False)  # noqa: E712
    return list(session.exec(query.order_by(_order_by(order))).all())


def list_drafts(pair_id: str, requester_id: str, session: Session) -> list[Diary]:
    """The requester's own drafts. Always empty in a solo room."""
    pair = get_pair_for_member(pair_id, requester_id, session)
    if not access.filters_drafts(pair):
        return []
    return list(
        session.exec(
            select(Diary)
            .where(
                Diary.pair_id == pair.id,
                Diary.author_id == requester_id,
                Diary.is_draft == True,  # noqa: E712
            )
            .order_by(col(Diary.created_at).desc())
        ).all()
    )


def _load_in_pair(pair_id: str, diary_id: str, session: Session) -> Diary:
    diary = session.get(Diary, diary_id)
    if not diary or diary.pair_id != pair_id:
        raise NotFoundError("Diary not found")
    return diary


def get_diary(pair_id: str, diary_id: str, requester_id: str, session: Session) -> Diary:
    pair = get_pair_for_member(pair_id, requester_id, session)
    diary = _load_in_pair(pair.id, diary_id, session)
    access.can_read_diary(diary, requester_id, pair).enforce()
    return diary


def create_diary(
    pair_id: str,
    author_id: str,
    title: Optional[str],
    content: Optional[str],
    is_draft: bool,
    created_at: Optional[datetime],
    session: Session,
) -> Diary:
    """Write a new entry. ``created_at`` back- or forward-dates it to a calendar day."""
    pair = get_pair_for_member(pair_id, author_id, session)
    clean = clean_title(title)

    now = utc_now()
    diary = Diary(
        pair_id=pair.id,
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
    logger.info("User %s wrote diary %s in pair %s", author_id, diary.id, pair.id)
    return diary


def update_diary(
    pair_id: str, diary_id: str, author_id: str, changes: dict[str, Any], session: Session
) -> Diary:
    """Apply a partial update. Keys: title, content, is_draft, created_at."""
    diary = _load_in_pair(pair_id, diary_id, session)
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


def delete_diary(pair_id: str, diary_id: str, author_id: str, session: Session) -> None:
    diary = _load_in_pair(pair_id, diary_id, session)
    access.can_write_diary(diary, author_id).enforce()
    session.delete(diary)
    session.commit()
    logger.info("User %s deleted diary %s", author_id, diary_id)


def days_with_entries(pair_id: str, year: int, month: int, requester_id: str, session: Session) -> list[int]:
    """Distinct days of ``year``/``month`` that have a visible entry, ascending."""
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12")
    if not 1 <= year <= 9999:
        raise ValidationError("Year is out of range")

    pair = get_pair_for_member(pair_id, requester_id, session)
    start, end = month_bounds(year, month)

    query = select(Diary.created_at).where(Diary.pair_id == pair.id, Diary.created_at >= start)
    if end is not None:
        query = query.where(Diary.created_at < end)
    if access.filters_drafts(pair):
        query = query.where(Diary.is_draft == False)  # noqa: E712

    return sorted({as_utc(created).day for created in session.exec(query).all()})
