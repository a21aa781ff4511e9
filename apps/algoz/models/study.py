"""Study planning tables: routines, problem recommendations, resource catalog."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlmodel import Field

from algoz.models.base import Model


class StudyRoutine(Model, table=True):
    __tablename__ = "study_routines"
    __table_args__ = (Index("ix_study_routines_user_id", "user_id"),)

    user_id: int = Field(sa_column=Column(Integer, ForeignKey("users.id"), nullable=False))
    title: str = Field(sa_column=Column(String(255), nullable=False))
    description: str | None = Field(default=None, sa_column=Column(Text, nullable=True))

    start_date: datetime | None = Field(default=None, sa_column=Column(DateTime, nullable=True))
    end_date: datetime | None = Field(default=None, sa_column=Column(DateTime, nullable=True))

    current_rating: int | None = Field(default=None, sa_column=Column(Integer, nullable=True))
    target_rating: int | None = Field(default=None, sa_column=Column(Integer, nullable=True))
    study_hours_per_week: int | None = Field(
        default=None, sa_column=Column(Integer, nullable=True)
    )
    contest_participation: str | None = Field(
        default=None, sa_column=Column(String(32), nullable=True)
    )

    topics: list[str] | None = Field(default=None, sa_column=Column(JSON, nullable=True))
    schedule: dict | None = Field(default=None, sa_column=Column(JSON, nullable=True))
    answers: dict | None = Field(default=None, sa_column=Column(JSON, nullable=True))
    routine: dict | None = Field(default=None, sa_column=Column(JSON, nullable=True))


class ProblemRecommendation(Model, table=True):
    __tablename__ = "problem_recommendations"
    __table_args__ = (
        Index("ix_problem_recommendations_user_id", "user_id"),
        Index("ix_problem_recommendations_user_problem", "user_id", "problem_id", unique=True),
    )

    user_id: int = Field(sa_column=Column(Integer, ForeignKey("users.id"), nullable=False))
    problem_id: str = Field(sa_column=Column(String(64), nullable=False))
    problem_title: str = Field(sa_column=Column(String(512), nullable=False))
    problem_url: str = Field(sa_column=Column(String(2048), nullable=False))
    difficulty: int | None = Field(default=None, sa_column=Column(Integer, nullable=True))
    tags: list[str] | None = Field(default=None, sa_column=Column(JSON, nullable=True))
    source: str | None = Field(default=None, sa_column=Column(String(64), nullable=True))
    status: str = Field(default="recommended", sa_column=Column(String(32), nullable=False))
    solved_on: datetime | None = Field(default=None, sa_column=Column(DateTime, nullable=True))


class LearningResource(Model, table=True):
    __tablename__ = "learning_resources"
    __table_args__ = (Index("ix_learning_resources_url", "url", unique=True),)

    title: str = Field(sa_column=Column(String(512), nullable=False))
    description: str = Field(sa_column=Column(Text, nullable=False))
    url: str = Field(sa_column=Column(String(2048), nullable=False))
    resource_type: str = Field(sa_column=Column(String(32), nullable=False))
    tags: list[str] | None = Field(default=None, sa_column=Column(JSON, nullable=True))
    difficulty: str | None = Field(default=None, sa_column=Column(String(32), nullable=True))
    source: str | None = Field(default=None, sa_column=Column(String(128), nullable=True))


__all__ = ["LearningResource", "ProblemRecommendation", "StudyRoutine"]
