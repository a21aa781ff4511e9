"""Persisted AI debug/explain sessions.

Rows are written once per completed analysis and never updated.
"""

from __future__ import annotations

from sqlalchemy import JSON, Column, ForeignKey, Index, Integer, String, Text
from sqlmodel import Field

from algoz.models.base import Model


class DebugSession(Model, table=True):
    __tablename__ = "debug_sessions"
    __table_args__ = (Index("ix_debug_sessions_user_id", "user_id"),)

    problem_statement: str = Field(sa_column=Column(Text, nullable=False))
    code: str = Field(sa_column=Column(Text, nullable=False))
    language: str = Field(sa_column=Column(String(32), nullable=False))
    ai_response: str = Field(sa_column=Column(Text, nullable=False))
    user_id: int | None = Field(
        default=None, sa_column=Column(Integer, ForeignKey("users.id"), nullable=True)
    )
    problem_id: str | None = Field(default=None, sa_column=Column(String(64), nullable=True))
    tags: list[str] | None = Field(default=None, sa_column=Column(JSON, nullable=True))


class ExplainSession(Model, table=True):
    __tablename__ = "explain_sessions"
    __table_args__ = (Index("ix_explain_sessions_user_id", "user_id"),)

    problem_statement: str = Field(sa_column=Column(Text, nullable=False))
    solution_code: str = Field(sa_column=Column(Text, nullable=False))
    language: str = Field(sa_column=Column(String(32), nullable=False))
    ai_response: str = Field(sa_column=Column(Text, nullable=False))
    user_id: int | None = Field(
        default=None, sa_column=Column(Integer, ForeignKey("users.id"), nullable=True)
    )
    problem_id: str | None = Field(default=None, sa_column=Column(String(64), nullable=True))
    tags: list[str] | None = Field(default=None, sa_column=Column(JSON, nullable=True))


__all__ = ["DebugSession", "ExplainSession"]
