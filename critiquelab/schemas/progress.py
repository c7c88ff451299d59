"""
Progress (command center) schemas.

GET /progress/rating        → RatingResponse
GET /progress/streaks       → StreakResponse
GET /progress/weaknesses    → WeaknessResponse
GET /progress/achievements  → AchievementListResponse
GET /progress               → ProgressResponse
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class RatingPointOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: datetime = Field(description="created_at of the score that produced this rating.")
    rating: int


class RatingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    rating: int = Field(description="Skill rating, clamped to 100–2500.", examples=[1005])
    tier: str = Field(description='"Bronze" | "Silver" | "Gold" | "Platinum" | "Diamond" | "Grandmaster"')
    tier_color: str
    percentile: int = Field(description="Approximate percentile, 0–100.")
    rating_history: list[RatingPointOut] = Field(description="One point per score, oldest first.")


class StreakResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    current_streak: int = Field(description="Consecutive active days ending today or yesterday.")
    longest_streak: int
    activity_map: dict[str, int] = Field(description="YYYY-MM-DD → number of scores that day.")


class CategoryTrendOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    category: str
    direction: str = Field(description='"improving" | "declining" | "stable"')


class WeaknessResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    clarity: list[int]
    logic: list[int]
    evidence: list[int]
    defense: list[int]
    weakest: str = Field(description="Category with the lowest mean score.")
    trend: list[CategoryTrendOut]


class AchievementOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    icon: str
    unlocked: bool
    unlocked_at: Optional[datetime] = None


class AchievementListResponse(BaseModel):
    unlocked: int
    total: int
    items: list[AchievementOut]


class ProgressResponse(BaseModel):
    rating: RatingResponse
    streaks: StreakResponse
    weaknesses: WeaknessResponse
    achievements: AchievementListResponse
