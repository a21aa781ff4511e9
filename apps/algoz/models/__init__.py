"""Convenient exports for writing ORM models (SQLModel)."""

from sqlmodel import Field, SQLModel

from algoz.models.analysis import DebugSession, ExplainSession
from algoz.models.base import Model, TimestampMixin
from algoz.models.codeforces import CodeforcesProfile
from algoz.models.study import LearningResource, ProblemRecommendation, StudyRoutine
from algoz.models.user import User

__all__ = [
    "Model",
    "TimestampMixin",
    "User",
    "CodeforcesProfile",
    "DebugSession",
    "ExplainSession",
    "StudyRoutine",
    "ProblemRecommendation",
    "LearningResource",
    "Field",
    "SQLModel",
]
