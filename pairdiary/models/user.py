"""User and session models."""

import secrets
from datetime import datetime

from sqlmodel import Field, SQLModel

from pairdiary.utils.dates import utc_now


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: str = Field(default_factory=lambda: f"usr_{secrets.token_hex(6)}", primary_key=True)
    username: str = Field(unique=True, index=True)
    account_id: str = Field(unique=True, index=True)  # public short code, never changes
    password_hash: str
    created_at: datetime = Field(default_factory=utc_now)


class AuthSession(SQLModel, table=True):
    __tablename__ = "sessions"

    id: str = Field(default_factory=lambda: f"ses_{secrets.token_hex(6)}", primary_key=True)
    token_hash: str = Field(unique=True, index=True)  # sha256 of the bearer token
    user_id: str = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utc_now)
    expires_at: datetime = Field(index=True)
