from __future__ import annotations

from datetime import datetime

from pydantic import Field

from algoz.schemas.base import CamelModel


class UserCreate(CamelModel):
    username: str = Field(min_length=3, max_length=64)
    password: str = Field(min_length=6, max_length=256)
    email: str | None = Field(default=None, max_length=255)
    display_name: str | None = Field(default=None, max_length=255)
    profile_picture: str | None = Field(default=None, max_length=2048)


class LoginRequest(CamelModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserOut(CamelModel):
    id: int
    username: str
    email: str | None
    display_name: str | None
    profile_picture: str | None
    created_at: datetime | None
    last_login: datetime | None


class AuthStatus(CamelModel):
    authenticated: bool
    user: UserOut | None = None
