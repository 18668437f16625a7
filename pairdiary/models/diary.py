"""Diary models."""

import secrets
from datetime import datetime

from sqlmodel import Field, SQLModel

from pairdiary.utils.dates import utc_now


class Diary(SQLModel, table=True):
    __tablename__ = "diaries"

    id: str = Field(default_factory=lambda: f"dia_{secrets.token_hex(6)}", primary_key=True)
    pair_id: str = Field(foreign_key="pairs.id", index=True)
    author_id: str = Field(foreign_key="users.id", index=True)
    title: str
    content: str = Field(default="")  # rich text, stored as-is
    is_draft: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now, index=True)  # entry date, user adjustable
    updated_at: datetime = Field(default_factory=utc_now)


class PublicDiary(SQLModel, table=True):
    __tablename__ = "public_diaries"

    id: str = Field(default_factory=lambda: f"pub_{secrets.token_hex(6)}", primary_key=True)
    author_id: str = Field(foreign_key="users.id", index=True)
    title: str
    content: str = Field(default="")
    is_draft: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)
