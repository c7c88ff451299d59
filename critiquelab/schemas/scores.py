"""
Score schemas.

POST   /scores/evaluate  → EvaluateRequest     → ScoreOut
POST   /scores           → ScoreCreateRequest  → ScoreOut
GET    /scores           → ScoreListResponse
GET    /scores/summary   → ScoreSummaryResponse
GET    /scores/export    → ScoreExport          (browser storage format, camelCase)
PUT    /scores/import    → ScoreExport          → ScoreListResponse

ScoreBreakdown is not an API schema: it validates the scoring tool call
returned by the AI gateway.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from critiquelab.models.argument_score import ScoreSource
from critiquelab.schemas.common import validate_submission_text

CategoryScore = Annotated[int, Field(ge=0, le=25)]
TotalScore = Annotated[int, Field(ge=0, le=100)]


# ---------------------------------------------------------------------------
# Gateway tool-call payload
# ---------------------------------------------------------------------------

class ScoreBreakdown(BaseModel):
    clarity_score: CategoryScore
    logic_score: CategoryScore
    evidence_score: CategoryScore
    defense_score: CategoryScore
    clarity_explanation: str
    logic_explanation: str
    evidence_explanation: str
    defense_explanation: str
    clarity_suggestion: str
    logic_suggestion: str
    evidence_suggestion: str
    defense_suggestion: str

    @property
    def total_score(self) -> int:
        return self.clarity_score + self.logic_score + self.evidence_score + self.defense_score


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class EvaluateRequest(BaseModel):
    """Text to score through the AI gateway."""
    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    text: str = Field(description="Argument to score. Control characters are stripped.")
    source: ScoreSource = Field(
        default=ScoreSource.critique,
        description="Product surface that produced the argument.",
    )

    @field_validator("text", mode="before")
    @classmethod
    def clean_text(cls, v: Any) -> str:
        return validate_submission_text(v)


class _ScoreFields(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    source: ScoreSource
    input_preview: str = Field(default="", max_length=1_000)
    clarity_score: CategoryScore
    logic_score: CategoryScore
    evidence_score: CategoryScore
    defense_score: CategoryScore
    clarity_explanation: str = ""
    logic_explanation: str = ""
    evidence_explanation: str = ""
    defense_explanation: str = ""
    clarity_suggestion: str = ""
    logic_suggestion: str = ""
    evidence_suggestion: str = ""
    defense_suggestion: str = ""


class ScoreCreateRequest(_ScoreFields):
    """A pre-scored argument. `total_score` is derived when omitted."""
    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    total_score: Optional[TotalScore] = None

    @model_validator(mode="after")
    def check_total(self) -> "ScoreCreateRequest":
        expected = (
            self.clarity_score + self.logic_score + self.evidence_score + self.defense_score
        )
        if self.total_score is None:
            self.total_score = expected
        elif self.total_score != expected:
            raise ValueError(
                f"total_score ({self.total_score}) must equal the sum of the "
                f"four category scores ({expected})"
            )
        return self


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class ScoreOut(_ScoreFields):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: str
    total_score: TotalScore
    created_at: datetime


class ScoreListResponse(BaseModel):
    total: int
    items: list[ScoreOut] = Field(description="Newest first.")


class CategoryAveragesOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    clarity: int
    logic: int
    evidence: int
    defense: int


class ScoreSummaryResponse(BaseModel):
    count: int
    average_score: int = Field(description="Rounded mean total score; 0 when empty.")
    highest_score: int = Field(description="Best total score; 0 when empty.")
    category_averages: CategoryAveragesOut


# ---------------------------------------------------------------------------
# Browser storage format (export / import)
# ---------------------------------------------------------------------------

class StoredScore(ScoreOut):
    """One record as the web client keeps it in local storage (camelCase keys)."""
    model_config = ConfigDict(
        from_attributes=True,
        use_enum_values=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator("created_at")
    @classmethod
    def normalize_to_utc(cls, v: datetime) -> datetime:
        """Timestamps without an offset are taken as UTC; others are converted."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class ScoreExport(BaseModel):
    scores: list[StoredScore] = Field(description="Newest first.")

    @field_validator("scores")
    @classmethod
    def check_unique_ids(cls, v: list[StoredScore]) -> list[StoredScore]:
        seen: set[str] = set()
        for s in v:
            if s.id in seen:
                raise ValueError(f"duplicate score id {s.id}")
            seen.add(s.id)
        return v
