"""
Weakness analyzer — per-category score series, weakest category, and the
short-term trend of each category.

Trend rule: with at least 4 points, compare the mean of the last 3 points
to the mean of the (up to) 3 points before them. A difference above +1 is
"improving", below -1 is "declining", anything else is "stable".
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from critiquelab.services.score_store import CATEGORIES, ScoreRecord, chronological


class TrendDirection:
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE    = "stable"


TREND_WINDOW = 3
TREND_MIN_POINTS = 4
TREND_THRESHOLD = 1
DEFAULT_WEAKEST = "clarity"


@dataclass
class CategoryTrend:
    category: str
    direction: str


@dataclass
class WeaknessState:
    clarity: list[int] = field(default_factory=list)
    logic: list[int] = field(default_factory=list)
    evidence: list[int] = field(default_factory=list)
    defense: list[int] = field(default_factory=list)
    weakest: str = DEFAULT_WEAKEST
    trend: list[CategoryTrend] = field(default_factory=list)

    def series(self, category: str) -> list[int]:
        return getattr(self, category)


def _mean(values: list[int]) -> float:
    return sum(values) / len(values)


def trend_direction(values: list[int]) -> str:
    if len(values) < TREND_MIN_POINTS:
        return TrendDirection.STABLE
    recent = _mean(values[-TREND_WINDOW:])
    older = _mean(values[-2 * TREND_WINDOW:-TREND_WINDOW])
    diff = recent - older
    if diff > TREND_THRESHOLD:
        return TrendDirection.IMPROVING
    if diff < -TREND_THRESHOLD:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE


def weakest_category(means: dict[str, float]) -> str:
    """Lowest mean wins; on a tie the earlier category in CATEGORIES wins."""
    weakest = CATEGORIES[0]
    for cat in CATEGORIES[1:]:
        if means[cat] < means[weakest]:
            weakest = cat
    return weakest


def analyze_weaknesses(scores: Iterable[ScoreRecord]) -> WeaknessState:
    ordered = chronological(scores)
    if not ordered:
        return WeaknessState()

    series = {cat: [s.category_score(cat) for s in ordered] for cat in CATEGORIES}
    means = {cat: _mean(values) for cat, values in series.items()}

    return WeaknessState(
        **series,
        weakest=weakest_category(means),
        trend=[CategoryTrend(category=cat, direction=trend_direction(series[cat]))
               for cat in CATEGORIES],
    )
