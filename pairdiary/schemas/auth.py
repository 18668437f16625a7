"""Auth request/response schemas."""

from typing import Optional

from pydantic import BaseModel


class CredentialsRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    id: str
    username: str
    account_id: str
    created_at: str


class LoginResponse(UserResponse):
    session_id: str


class LogoutAllResponse(BaseModel):
    sessions_closed: int
