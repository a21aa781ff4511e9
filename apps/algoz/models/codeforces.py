"""Linked Codeforces profile (latest snapshot only, no history)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, Integer, String
from sqlmodel import Field

from algoz.core.utils import utcnow_naive
from algoz.models.base import Model


class CodeforcesProfile(Model, table=True):
    __tablename__ = "codeforces_profiles"
    __table_args__ = (
        Index("ix_codeforces_profiles_user_id", "user_id", unique=True),
        Index("ix_codeforces_profiles_handle", "handle", unique=True),
    )

    user_id: int = Field(sa_column=Column(Integer, ForeignKey("users.id"), nullable=False))
    handle: str = Field(sa_column=Column(String(64), nullable=False))

    rating: int | None = Field(default=None, sa_column=Column(Integer, nullable=True))
    max_rating: int | None = Field(default=None, sa_column=Column(Integer, nullable=True))
    rank: str | None = Field(default=None, sa_column=Column(String(64), nullable=True))
    max_rank: str | None = Field(default=None, sa_column=Column(String(64), nullable=True))
    problems_solved: int | None = Field(default=None, sa_column=Column(Integer, nullable=True))
    contests_participated: int | None = Field(
        default=None, sa_column=Column(Integer, nullable=True)
    )
    profile_data: dict | None = Field(default=None, sa_column=Column(JSON, nullable=True))

    last_updated: datetime = Field(
        default_factory=utcnow_naive, sa_column=Column(DateTime, nullable=False)
    )


__all__ = ["CodeforcesProfile"]
