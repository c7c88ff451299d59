"""
Progress router — derived views over the score history (command center).

GET /progress                 — all views below in one response
GET /progress/rating          — ELO-style rating, tier, percentile, history
GET /progress/streaks         — current / longest streak and daily activity
GET /progress/weaknesses      — per-category series, weakest, trends
GET /progress/achievements    — badge catalog with unlock state

Every call recomputes from the stored history; nothing here is cached.
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from critiquelab.routers.deps import get_score_store
from critiquelab.schemas.progress import (
    AchievementListResponse,
    AchievementOut,
    ProgressResponse,
    RatingResponse,
    StreakResponse,
    WeaknessResponse,
)
from critiquelab.services.achievements import Achievement, evaluate_achievements
from critiquelab.services.rating_engine import calculate_rating
from critiquelab.services.score_store import ScoreStore
from critiquelab.services.streak_tracker import calculate_streaks
from critiquelab.services.weakness_analyzer import analyze_weaknesses

router = APIRouter(prefix="/progress", tags=["progress"])

_TODAY_QUERY = Query(
    default=None,
    description="Reference day for current_streak. Defaults to today (UTC).",
    examples=["2026-10-19"],
)


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _achievements_to_response(items: list[Achievement]) -> AchievementListResponse:
    return AchievementListResponse(
        unlocked=sum(1 for a in items if a.unlocked),
        total=len(items),
        items=[AchievementOut.model_validate(a) for a in items],
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("", response_model=ProgressResponse, summary="All progress views at once")
def progress(
    today: Optional[date] = _TODAY_QUERY,
    store: ScoreStore = Depends(get_score_store),
):
    scores = store.scores
    return ProgressResponse(
        rating=RatingResponse.model_validate(calculate_rating(scores)),
        streaks=StreakResponse.model_validate(calculate_streaks(scores, today=today)),
        weaknesses=WeaknessResponse.model_validate(analyze_weaknesses(scores)),
        achievements=_achievements_to_response(evaluate_achievements(scores)),
    )


@router.get("/rating", response_model=RatingResponse, summary="Skill rating")
def rating(store: ScoreStore = Depends(get_score_store)):
    """
    Each score is a match against a benchmark opponent worth 65/100
    (K = 32, seeded at 1000, clamped to 100–2500).

    ### Tiers
    | Tier | From |
    |---|---|
    | Bronze | 0 |
    | Silver | 800 |
    | Gold | 1000 |
    | Platinum | 1200 |
    | Diamond | 1400 |
    | Grandmaster | 1600 |
    """
    return RatingResponse.model_validate(calculate_rating(store.scores))


@router.get("/streaks", response_model=StreakResponse, summary="Daily activity streaks")
def streaks(
    today: Optional[date] = _TODAY_QUERY,
    store: ScoreStore = Depends(get_score_store),
):
    return StreakResponse.model_validate(calculate_streaks(store.scores, today=today))


@router.get("/weaknesses", response_model=WeaknessResponse, summary="Category weaknesses and trends")
def weaknesses(store: ScoreStore = Depends(get_score_store)):
    return WeaknessResponse.model_validate(analyze_weaknesses(store.scores))


@router.get(
    "/achievements",
    response_model=AchievementListResponse,
    summary="Achievement badges",
)
def achievements(store: ScoreStore = Depends(get_score_store)):
    return _achievements_to_response(evaluate_achievements(store.scores))
