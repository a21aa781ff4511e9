"""Curated learning-resource catalog (seeded once, read-only through the API)."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlmodel import Session, select

from algoz.models.study import LearningResource

logger = logging.getLogger(__name__)

SEED_RESOURCES: list[dict] = [
    {
        "title": "Competitive Programming Algorithms",
        "description": "A comprehensive course covering advanced algorithms for competitive programming",
        "url": "https://example.com/cp-algorithms",
        "resource_type": "course",
        "tags": ["algorithms", "data structures", "competitive programming"],
        "difficulty": "intermediate",
        "source": "CP Academy",
    },
    {
        "title": "Algorithms for Competitive Programming (e-maxx)",
        "description": "Reference articles on number theory, graphs, strings and geometry with proofs and code",
        "url": "https://cp-algorithms.com/",
        "resource_type": "article",
        "tags": ["algorithms", "number theory", "graphs", "strings"],
        "difficulty": "advanced",
        "source": "cp-algorithms",
    },
    {
        "title": "Competitive Programmer's Handbook",
        "description": "Free book introducing the core techniques used in programming contests",
        "url": "https://cses.fi/book/book.pdf",
        "resource_type": "book",
        "tags": ["fundamentals", "dynamic programming", "graphs"],
        "difficulty": "beginner",
        "source": "CSES",
    },
    {
        "title": "CSES Problem Set",
        "description": "Three hundred classic practice problems grouped by technique",
        "url": "https://cses.fi/problemset/",
        "resource_type": "practice",
        "tags": ["practice", "dynamic programming", "graphs", "range queries"],
        "difficulty": "intermediate",
        "source": "CSES",
    },
    {
        "title": "Codeforces EDU",
        "description": "Interactive lessons with step-by-step practice on binary search, segment trees and more",
        "url": "https://codeforces.com/edu/courses",
        "resource_type": "course",
        "tags": ["binary search", "segment tree", "two pointers"],
        "difficulty": "intermediate",
        "source": "Codeforces",
    },
    {
        "title": "USACO Guide",
        "description": "Structured curriculum from bronze to platinum with curated problems",
        "url": "https://usaco.guide/",
        "resource_type": "course",
        "tags": ["fundamentals", "greedy", "dynamic programming", "graphs"],
        "difficulty": "beginner",
        "source": "USACO Guide",
    },
]


@dataclass
class LearningResourceService:
    session: Session

    def seed_defaults(self) -> int:
        """Insert catalog entries whose URL is not stored yet; returns rows added."""
        existing = set(self.session.exec(select(LearningResource.url)))
        added = 0
        for entry in SEED_RESOURCES:
            if entry["url"] in existing:
                continue
            self.session.add(LearningResource(**entry))
            added += 1
        if added:
            self.session.commit()
            logger.info("Seeded %d learning resources", added)
        return added

    def list_resources(
        self,
        *,
        tag: str | None = None,
        resource_type: str | None = None,
        difficulty: str | None = None,
    ) -> list[LearningResource]:
        stmt = select(LearningResource).order_by(LearningResource.id.asc())
        if resource_type:
            stmt = stmt.where(LearningResource.resource_type == resource_type)
        if difficulty:
            stmt = stmt.where(LearningResource.difficulty == difficulty)
        rows = list(self.session.exec(stmt))
        if tag:
            # JSON array column; filtered in Python.
            needle = tag.strip().lower()
            rows = [r for r in rows if needle in {t.lower() for t in (r.tags or [])}]
        return rows


__all__ = ["LearningResourceService", "SEED_RESOURCES"]
