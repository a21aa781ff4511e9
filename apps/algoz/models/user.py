"""User accounts for the web client."""

from __future__ import annotations

from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field

from algoz.models.base import Model


class User(Model, table=True):
    """Application user account."""

    __tablename__ = "users"
    __table_args__ = (sa.Index("ix_users_username", "username", unique=True),)

    username: str = Field(sa_column=sa.Column(sa.String(length=64), nullable=False))
    password_hash: str = Field(sa_column=sa.Column(sa.String(length=255), nullable=False))
    email: str | None = Field(default=None, sa_column=sa.Column(sa.String(length=255)))
    display_name: str | None = Field(default=None, sa_column=sa.Column(sa.String(length=255)))
    profile_picture: str | None = Field(
        default=None, sa_column=sa.Column(sa.String(length=2048), nullable=True)
    )
    last_login: datetime | None = Field(default=None, sa_column=sa.Column(sa.DateTime, nullable=True))


__all__ = ["User"]
