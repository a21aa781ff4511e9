"""Personalised study routines.

A routine is a deterministic plan derived from the user's current and target
rating, weak topics, weekly hours and contest habit. It is stored once and
not regenerated in place.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from sqlmodel import Session, select

from algoz.core.utils import clamp_int, round_down, utcnow_naive
from algoz.models.study import StudyRoutine
from algoz.schemas.study import StudyRoutineCreate

DEFAULT_TOPICS = ["Greedy Algorithms", "Dynamic Programming", "Graph Algorithms"]
STUDY_DAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday"]
CONTEST_DAY = "sunday"
CONTEST_MINUTES = 120
MIN_WEEKS = 4
MAX_WEEKS = 12

# weekly -> every week, biweekly -> every 2nd week, monthly -> every 4th week
_CONTEST_EVERY = {"weekly": 1, "biweekly": 2, "monthly": 4}


def plan_weeks(current_rating: int, target_rating: int) -> int:
    gap = max(0, target_rating - current_rating)
    return clamp_int(max(MIN_WEEKS, math.ceil(gap / 100)), lo=MIN_WEEKS, hi=MAX_WEEKS)


def practice_band(rating: int) -> dict[str, int]:
    lo = max(800, round_down(rating, 100))
    return {"min": lo, "max": lo + 200}


def daily_schedule(hours_per_week: int, contest_participation: str) -> dict[str, dict[str, int]]:
    total = hours_per_week * 60
    has_contests = contest_participation in _CONTEST_EVERY
    if has_contests:
        total = max(0, total - CONTEST_MINUTES)
    per_day = total // len(STUDY_DAYS)
    wrap_up = "upsolving" if has_contests else "review"
    topic = int(per_day * 0.4)
    practice = int(per_day * 0.4)
    schedule = {
        day: {
            "topicStudy": topic,
            "practice": practice,
            wrap_up: per_day - topic - practice,
        }
        for day in STUDY_DAYS
    }
    schedule[CONTEST_DAY] = {"contest": CONTEST_MINUTES} if has_contests else {"rest": 0}
    return schedule


def build_routine(payload: StudyRoutineCreate) -> dict[str, Any]:
    topics = [t.strip() for t in payload.weak_topics if t.strip()] or list(DEFAULT_TOPICS)
    weeks = plan_weeks(payload.current_rating, payload.target_rating)
    gap = max(0, payload.target_rating - payload.current_rating)
    every = _CONTEST_EVERY.get(payload.contest_participation)

    plan = []
    for week in range(1, weeks + 1):
        checkpoint = payload.current_rating + round(gap * week / weeks)
        plan.append(
            {
                "week": week,
                "focusTopic": topics[(week - 1) % len(topics)],
                "problemRating": max(800, round_down(checkpoint, 100) + 100),
                "ratingCheckpoint": checkpoint,
                "contest": bool(every) and week % every == 0,
            }
        )

    band = practice_band(payload.current_rating)
    summary = (
        f"{weeks}-week plan from {payload.current_rating} to {payload.target_rating}: "
        f"{payload.study_hours_per_week}h/week, rotating {', '.join(topics)}; "
        f"start practising problems rated {band['min']}-{band['max']}."
    )
    return {
        "weeks": plan,
        "practiceBand": band,
        "topics": topics,
        "schedule": daily_schedule(payload.study_hours_per_week, payload.contest_participation),
        "summary": summary,
    }


@dataclass
class StudyRoutineService:
    session: Session

    def create(self, payload: StudyRoutineCreate) -> StudyRoutine:
        routine = build_routine(payload)
        start = utcnow_naive()
        row = StudyRoutine(
            user_id=payload.user_id,
            title=payload.title
            or f"Road to {payload.target_rating} ({len(routine['weeks'])} weeks)",
            description=routine["summary"],
            start_date=start,
            end_date=start + timedelta(weeks=len(routine["weeks"])),
            current_rating=payload.current_rating,
            target_rating=payload.target_rating,
            study_hours_per_week=payload.study_hours_per_week,
            contest_participation=payload.contest_participation,
            topics=routine["topics"],
            schedule=routine["schedule"],
            answers=payload.model_dump(mode="json", by_alias=True),
            routine=routine,
        )
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return row

    def list_for_user(self, user_id: int) -> list[StudyRoutine]:
        stmt = (
            select(StudyRoutine)
            .where(StudyRoutine.user_id == user_id)
            .order_by(StudyRoutine.created_at.desc(), StudyRoutine.id.desc())
        )
        return list(self.session.exec(stmt))


__all__ = ["StudyRoutineService", "build_routine", "daily_schedule", "plan_weeks", "practice_band"]
