"""Read/write rules for diary entries.

Pure functions over already-loaded rows. Nothing here touches the
database, so the rules can be checked without a request or a session.

Pair diaries:
    published entry  -> any member of the pair
    draft entry      -> the author only; in a solo room the single member
    write            -> the author only

Public diaries:
    published entry  -> anyone, signed in or not
    draft entry      -> the author only
    write            -> the author only
"""

from dataclasses import dataclass
from typing import Optional

from pairdiary.errors import ForbiddenError
from pairdiary.models.diary import Diary, PublicDiary
from pairdiary.models.pair import Pair


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    reason: str = ""

    def enforce(self) -> None:
        """Raise ForbiddenError when access was denied."""
        if not self.allowed:
            raise ForbiddenError(self.reason)


ALLOW = AccessDecision(True)


def deny(reason: str) -> AccessDecision:
    return AccessDecision(False, reason)


def is_member(pair: Pair, user_id: Optional[str]) -> AccessDecision:
    if user_id is not None and pair.has_member(user_id):
        return ALLOW
    return deny("You are not a member of this pair")


def can_read_diary(diary: Diary, reader_id: Optional[str], pair: Pair) -> AccessDecision:
    membership = is_member(pair, reader_id)
    if not membership.allowed:
        return membership
    if not diary.is_draft or pair.is_solo:
        return ALLOW
    if diary.author_id == reader_id:
        return ALLOW
    return deny("Drafts are only visible to their author")


def can_write_diary(diary: Diary | PublicDiary, actor_id: Optional[str]) -> AccessDecision:
    if actor_id is not None and diary.author_id == actor_id:
        return ALLOW
    return deny("Only the author can change this diary")


def can_read_public_diary(diary: PublicDiary, reader_id: Optional[str]) -> AccessDecision:
    if not diary.is_draft:
        return ALLOW
    if reader_id is not None and diary.author_id == reader_id:
        return ALLOW
    return deny("This diary is saved as a draft")


def filters_drafts(pair: Pair) -> bool:
    """Solo rooms have no publishing step, so nothing is ever hidden there."""
    return not pair.is_solo
