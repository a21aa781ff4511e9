from __future__ import annotations

from datetime import datetime

from pydantic import Field

from algoz.schemas.base import CamelModel
from algoz.schemas.realtime import ProfileSnapshot


class CodeforcesUser(CamelModel):
    """Subset of Codeforces `user.info` fields surfaced by the search endpoint."""

    handle: str
    rating: int | None = None
    max_rating: int | None = None
    rank: str | None = None
    max_rank: str | None = None
    country: str | None = None
    organization: str | None = None
    avatar: str | None = None
    title_photo: str | None = None
    contribution: int | None = None
    friend_of_count: int | None = None


class CodeforcesProblem(CamelModel):
    contest_id: int | None = None
    index: str
    name: str
    rating: int | None = None
    tags: list[str] = Field(default_factory=list)

    @property
    def problem_id(self) -> str:
        return f"{self.contest_id}{self.index}" if self.contest_id is not None else self.index

    @property
    def url(self) -> str:
        if self.contest_id is None:
            return "https://codeforces.com/problemset"
        return f"https://codeforces.com/problemset/problem/{self.contest_id}/{self.index}"


class CodeforcesProfileCreate(CamelModel):
    user_id: int
    handle: str = Field(min_length=1, max_length=64)


class CodeforcesProfileOut(ProfileSnapshot):
    id: int
    user_id: int
    handle: str
    last_updated: datetime


class CodeforcesSearchResult(CamelModel):
    handle: str
    snapshot: ProfileSnapshot
    user: CodeforcesUser


__all__ = [
    "CodeforcesProblem",
    "CodeforcesProfileCreate",
    "CodeforcesProfileOut",
    "CodeforcesSearchResult",
    "CodeforcesUser",
]
