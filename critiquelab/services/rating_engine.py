"""
Rating engine — ELO-style skill rating derived from the score history.

Every scored argument is treated as a "match" against a fixed benchmark
opponent whose skill corresponds to a total score of 65/100:

    actual   = total / 100
    expected = 1 / (1 + 10 ** ((65 - total) / 40))
    rating   = clamp(round(rating + K * (actual - expected)), 100, 2500)

The rating is seeded at 1000 and replayed over the full history in
chronological order on every call. Nothing is persisted.

Public API
----------
calculate_rating(scores)   -> RatingState
get_tier(rating)           -> Tier
get_percentile(rating)     -> int
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from critiquelab.core.rounding import round_half_up
from critiquelab.services.score_store import ScoreRecord, chronological


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

INITIAL_RATING = 1000
K_FACTOR = 32
BENCHMARK_SCORE = 65
SCORE_SCALE = 40
MIN_RATING = 100
MAX_RATING = 2500

PERCENTILE_CENTER = 1000
PERCENTILE_SPREAD = 200


@dataclass(frozen=True)
class Tier:
    min_rating: int
    label: str
    color: str


# Ascending thresholds; lookup walks from the top down.
TIERS: tuple[Tier, ...] = (
    Tier(0,    "Bronze",      "hsl(30 60% 50%)"),
    Tier(800,  "Silver",      "hsl(220 8% 55%)"),
    Tier(1000, "Gold",        "hsl(45 85% 50%)"),
    Tier(1200, "Platinum",    "hsl(200 70% 55%)"),
    Tier(1400, "Diamond",     "hsl(280 60% 60%)"),
    Tier(1600, "Grandmaster", "hsl(0 70% 55%)"),
)


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------

@dataclass
class RatingPoint:
    date: datetime
    rating: int


@dataclass
class RatingState:
    rating: int
    tier: str
    tier_color: str
    percentile: int
    rating_history: list[RatingPoint] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

def get_tier(rating: int) -> Tier:
    for tier in reversed(TIERS):
        if rating >= tier.min_rating:
            return tier
    return TIERS[0]


def get_percentile(rating: int) -> int:
    """Approximate percentile from a logistic curve centred on 1000."""
    z = (rating - PERCENTILE_CENTER) / PERCENTILE_SPREAD
    return round_half_up(100 / (1 + math.exp(-z)))


def expected_outcome(total_score: int) -> float:
    return 1 / (1 + 10 ** ((BENCHMARK_SCORE - total_score) / SCORE_SCALE))


def apply_match(rating: int, total_score: int) -> int:
    """One rating update for a single scored argument."""
    actual = total_score / 100
    updated = round_half_up(rating + K_FACTOR * (actual - expected_outcome(total_score)))
    return max(MIN_RATING, min(MAX_RATING, updated))


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def calculate_rating(scores: Iterable[ScoreRecord]) -> RatingState:
    rating = INITIAL_RATING
    history: list[RatingPoint] = []

    for score in chronological(scores):
        rating = apply_match(rating, score.total_score)
        history.append(RatingPoint(date=score.created_at, rating=rating))

    tier = get_tier(rating)
    return RatingState(
        rating=rating,
        tier=tier.label,
        tier_color=tier.color,
        percentile=get_percentile(rating),
        rating_history=history,
    )
