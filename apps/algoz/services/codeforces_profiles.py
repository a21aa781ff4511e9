"""Storage for linked Codeforces profiles.

Each user has at most one linked handle and one stored snapshot. Writes are
unconditional overwrites (last write wins); no history is kept.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Callable

from sqlmodel import Session, select

from algoz.core.database import session_scope
from algoz.core.utils import utcnow_naive
from algoz.models.codeforces import CodeforcesProfile
from algoz.schemas.codeforces import CodeforcesProfileOut
from algoz.schemas.realtime import ProfileSnapshot


def to_snapshot(row: CodeforcesProfile) -> ProfileSnapshot:
    return ProfileSnapshot(
        rating=row.rating,
        max_rating=row.max_rating,
        rank=row.rank,
        max_rank=row.max_rank,
        problems_solved=row.problems_solved,
        contests_participated=row.contests_participated,
        profile_data=dict(row.profile_data or {}),
    )


def to_profile_out(row: CodeforcesProfile) -> CodeforcesProfileOut:
    return CodeforcesProfileOut(
        id=row.id or 0,
        user_id=row.user_id,
        handle=row.handle,
        last_updated=row.last_updated,
        **to_snapshot(row).model_dump(),
    )


@dataclass
class CodeforcesProfileService:
    session: Session

    def get_by_user(self, user_id: int) -> CodeforcesProfile | None:
        return self.session.exec(
            select(CodeforcesProfile).where(CodeforcesProfile.user_id == user_id)
        ).first()

    def get_by_handle(self, handle: str) -> CodeforcesProfile | None:
        return self.session.exec(
            select(CodeforcesProfile).where(CodeforcesProfile.handle == handle)
        ).first()

    def save_snapshot(
        self, *, user_id: int, handle: str, snapshot: ProfileSnapshot
    ) -> CodeforcesProfile:
        """Create or overwrite the stored profile for `user_id`."""
        row = self.get_by_user(user_id)
        if row is None:
            row = CodeforcesProfile(user_id=user_id, handle=handle)
        row.handle = handle
        row.rating = snapshot.rating
        row.max_rating = snapshot.max_rating
        row.rank = snapshot.rank
        row.max_rank = snapshot.max_rank
        row.problems_solved = snapshot.problems_solved
        row.contests_participated = snapshot.contests_participated
        row.profile_data = dict(snapshot.profile_data)
        now = utcnow_naive()
        row.last_updated = now
        row.updated_at = now
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return row

    def unlink(self, user_id: int) -> bool:
        row = self.get_by_user(user_id)
        if row is None:
            return False
        self.session.delete(row)
        self.session.commit()
        return True


class SqlProfileStore:
    """Session-per-call snapshot writer used by the profile update scheduler."""

    def __init__(
        self, session_factory: Callable[[], AbstractContextManager[Session]] = session_scope
    ) -> None:
        self._session_factory = session_factory

    def save_snapshot(self, user_id: int, handle: str, snapshot: ProfileSnapshot) -> ProfileSnapshot:
        with self._session_factory() as session:
            row = CodeforcesProfileService(session).save_snapshot(
                user_id=user_id, handle=handle, snapshot=snapshot
            )
            return to_snapshot(row)

    def load_snapshot(self, user_id: int) -> ProfileSnapshot | None:
        with self._session_factory() as session:
            row = CodeforcesProfileService(session).get_by_user(user_id)
            return to_snapshot(row) if row is not None else None


__all__ = ["CodeforcesProfileService", "SqlProfileStore", "to_profile_out", "to_snapshot"]
