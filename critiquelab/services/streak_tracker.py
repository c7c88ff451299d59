"""
Streak tracker — daily activity derived from the score history.

A day is "active" when at least one argument was scored on it (UTC
calendar date of created_at). A streak is a run of active days whose
calendar-day difference is exactly 1. Day differences are computed on
date ordinals, never by dividing elapsed milliseconds.

Public API
----------
calculate_streaks(scores, today)   -> StreakState
build_activity_map(scores)         -> dict[str, int]
longest_streak(days)               -> int
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Iterable, Optional

from critiquelab.services.score_store import ScoreRecord


@dataclass
class StreakState:
    current_streak: int
    longest_streak: int
    activity_map: dict[str, int] = field(default_factory=dict)  # YYYY-MM-DD → count


def _today() -> date:
    return datetime.now(tz=timezone.utc).date()


def score_day(score: ScoreRecord) -> date:
    return score.created_at.astimezone(timezone.utc).date()


def build_activity_map(scores: Iterable[ScoreRecord]) -> dict[str, int]:
    counts = Counter(score_day(s).isoformat() for s in scores)
    return dict(sorted(counts.items()))


def _runs(days: list[date]) -> list[int]:
    """Running streak length at each of the (sorted, distinct) days."""
    runs: list[int] = []
    for i, day in enumerate(days):
        if i > 0 and day.toordinal() - days[i - 1].toordinal() == 1:
            runs.append(runs[-1] + 1)
        else:
            runs.append(1)
    return runs


def longest_streak(days: Iterable[date]) -> int:
    return max(_runs(sorted(set(days))), default=0)


def calculate_streaks(
    scores: Iterable[ScoreRecord],
    today: Optional[date] = None,
) -> StreakState:
    """
    current_streak counts the run ending on the latest active day, but only
    while that day is today or yesterday. Any older gap resets it to 0.
    """
    scores = list(scores)
    ref = today or _today()

    days = sorted({score_day(s) for s in scores})
    runs = _runs(days)

    current = 0
    if days and ref.toordinal() - days[-1].toordinal() <= 1:
        current = runs[-1]

    return StreakState(
        current_streak=current,
        longest_streak=max(runs, default=0),
        activity_map=build_activity_map(scores),
    )
