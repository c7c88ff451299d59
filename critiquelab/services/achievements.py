"""
Achievement evaluator — a fixed badge catalog evaluated against the score
history on every call.

Unlocking is always a derived fact, never an event: nothing is persisted,
and deleting scores can re-lock a badge.

unlocked_at
-----------
The created_at of the record at which the badge first became true, found
by replaying the chronological prefixes of the history. Every predicate
only ever flips from False to True as records are appended, so the first
satisfying prefix is well defined.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Optional

from critiquelab.services.score_store import ScoreRecord, chronological
from critiquelab.services.streak_tracker import longest_streak, score_day


# ---------------------------------------------------------------------------
# Evaluation context
# ---------------------------------------------------------------------------

@dataclass
class AchievementContext:
    """Everything the catalog predicates are allowed to look at."""
    total_count: int
    highest_score: int
    perfect_logic: bool
    perfect_clarity: bool
    longest_streak: int
    distinct_sources: int

    @classmethod
    def from_scores(cls, scores: list[ScoreRecord]) -> "AchievementContext":
        return cls(
            total_count=len(scores),
            highest_score=max((s.total_score for s in scores), default=0),
            perfect_logic=any(s.logic_score == 25 for s in scores),
            perfect_clarity=any(s.clarity_score == 25 for s in scores),
            longest_streak=longest_streak(score_day(s) for s in scores),
            distinct_sources=len({s.source for s in scores}),
        )


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AchievementDefinition:
    id: str
    name: str
    description: str
    icon: str
    predicate: Callable[[AchievementContext], bool]


@dataclass
class Achievement:
    id: str
    name: str
    description: str
    icon: str
    unlocked: bool
    unlocked_at: Optional[datetime] = None


CATALOG: tuple[AchievementDefinition, ...] = (
    AchievementDefinition(
        "first_blood", "First Blood", "Complete your first scored argument", "⚔️",
        lambda c: c.total_count >= 1,
    ),
    AchievementDefinition(
        "five_rounds", "Warming Up", "Score 5 arguments", "🔥",
        lambda c: c.total_count >= 5,
    ),
    AchievementDefinition(
        "twenty_rounds", "Veteran", "Score 20 arguments", "🎖️",
        lambda c: c.total_count >= 20,
    ),
    AchievementDefinition(
        "sharpshooter", "Sharpshooter", "Score above 80 on any argument", "🎯",
        lambda c: c.highest_score >= 80,
    ),
    AchievementDefinition(
        "masterclass", "Masterclass", "Score above 90 on any argument", "👑",
        lambda c: c.highest_score >= 90,
    ),
    AchievementDefinition(
        "iron_logic", "Iron Logic", "Get a perfect Logic score (25/25)", "🧠",
        lambda c: c.perfect_logic,
    ),
    AchievementDefinition(
        "crystal_clear", "Crystal Clear", "Get a perfect Clarity score (25/25)", "💎",
        lambda c: c.perfect_clarity,
    ),
    AchievementDefinition(
        "streak_3", "On Fire", "Maintain a 3-day streak", "🔥",
        lambda c: c.longest_streak >= 3,
    ),
    AchievementDefinition(
        "streak_7", "Unstoppable", "Maintain a 7-day streak", "⚡",
        lambda c: c.longest_streak >= 7,
    ),
    AchievementDefinition(
        "all_sources", "Well-Rounded", "Score from critique, coach, and autopsy", "🌐",
        lambda c: c.distinct_sources >= 3,
    ),
)


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def evaluate_achievements(scores: Iterable[ScoreRecord]) -> list[Achievement]:
    """Evaluate the whole catalog, in declaration order."""
    ordered = chronological(scores)
    final = AchievementContext.from_scores(ordered)

    unlocked_at: dict[str, datetime] = {}
    pending = [d for d in CATALOG if d.predicate(final)]
    for i, score in enumerate(ordered):
        if not pending:
            break
        ctx = AchievementContext.from_scores(ordered[: i + 1])
        for definition in [d for d in pending if d.predicate(ctx)]:
            unlocked_at[definition.id] = score.created_at
            pending.remove(definition)

    return [
        Achievement(
            id=d.id,
            name=d.name,
            description=d.description,
            icon=d.icon,
            unlocked=d.predicate(final),
            unlocked_at=unlocked_at.get(d.id),
        )
        for d in CATALOG
    ]
