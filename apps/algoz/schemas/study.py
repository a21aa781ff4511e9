from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import Field, model_validator

from algoz.schemas.base import CamelModel

RecommendationStatus = Literal["recommended", "attempted", "solved", "skipped"]
ContestParticipation = Literal["weekly", "biweekly", "monthly", "none"]


class RecommendationGenerateRequest(CamelModel):
    user_id: int
    handle: str = Field(min_length=1, max_length=64)
    count: int = Field(default=5, ge=1, le=20)


class RecommendationUpdate(CamelModel):
    status: RecommendationStatus


class RecommendationOut(CamelModel):
    id: int
    user_id: int
    problem_id: str
    problem_title: str
    problem_url: str
    difficulty: int | None
    tags: list[str]
    source: str | None
    status: str
    solved_on: datetime | None
    created_at: datetime | None


class StudyRoutineCreate(CamelModel):
    user_id: int
    title: str | None = Field(default=None, max_length=255)
    current_rating: int = Field(default=1200, ge=0, le=4000)
    target_rating: int = Field(default=1800, ge=0, le=4000)
    weak_topics: list[str] = Field(default_factory=list)
    study_hours_per_week: int = Field(default=10, ge=1, le=80)
    contest_participation: ContestParticipation = "weekly"

    @model_validator(mode="after")
    def _target_not_below_current(self) -> "StudyRoutineCreate":
        if self.target_rating < self.current_rating:
            raise ValueError("targetRating must be at least currentRating")
        return self


class StudyRoutineOut(CamelModel):
    id: int
    user_id: int
    title: str
    description: str | None
    current_rating: int | None
    target_rating: int | None
    study_hours_per_week: int | None
    contest_participation: str | None
    start_date: datetime | None
    end_date: datetime | None
    topics: list[str]
    schedule: dict[str, Any]
    routine: dict[str, Any]
    created_at: datetime | None


class LearningResourceOut(CamelModel):
    id: int
    title: str
    description: str
    url: str
    resource_type: str
    tags: list[str]
    difficulty: str | None
    source: str | None
