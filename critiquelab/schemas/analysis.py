"""
Argument autopsy and counterargument coach schemas.

POST /autopsy → AnalysisRequest → AutopsyResponse
POST /coach   → AnalysisRequest → CoachResponse

Like the critique models, these validate the gateway output before anything
reaches the client; wire keys are camelCase.
"""
from __future__ import annotations

from typing import Annotated, Any, Literal, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from critiquelab.schemas.common import (
    ANALYSIS_MAX_TEXT_LENGTH,
    ANALYSIS_MIN_TEXT_LENGTH,
    validate_submission_text,
)


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------

class AnalysisRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    text: str = Field(
        description=(
            f"Argument to analyse, {ANALYSIS_MIN_TEXT_LENGTH}–{ANALYSIS_MAX_TEXT_LENGTH} "
            "characters. Control characters are stripped."
        ),
    )

    @field_validator("text", mode="before")
    @classmethod
    def clean_text(cls, v: Any) -> str:
        return validate_submission_text(
            v,
            min_length=ANALYSIS_MIN_TEXT_LENGTH,
            max_length=ANALYSIS_MAX_TEXT_LENGTH,
        )


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


Percentage = Annotated[float, Field(ge=0, le=100)]
Count = Annotated[int, Field(ge=0)]


# ---------------------------------------------------------------------------
# Argument autopsy
# ---------------------------------------------------------------------------

SentenceCategory = Literal["claim", "reasoning", "evidence", "impact", "filler"]
SuggestionType = Literal[
    "add_warrant",
    "add_evidence",
    "add_impact",
    "reduce_filler",
    "clarify_claim",
    "strengthen_reasoning",
]


class AnalyzedSentence(_CamelModel):
    text: str
    category: SentenceCategory
    explanation: str


class CategoryBreakdown(_CamelModel):
    claims: Count
    reasoning: Count
    evidence: Count
    impact: Count
    filler: Count


class HealthSummary(_CamelModel):
    analysis_percentage: Percentage
    filler_percentage: Percentage
    missing_components: list[str]
    argument_strength_score: Annotated[int, Field(ge=0, le=100)]
    breakdown: CategoryBreakdown


class AutopsySuggestion(_CamelModel):
    type: SuggestionType
    text: str
    target_sentence: Optional[Count] = None


class ArgumentAnalysis(_CamelModel):
    """Every sentence classified once, plus a health summary and fixes."""
    sentences: list[AnalyzedSentence] = Field(min_length=1)
    health_summary: HealthSummary
    suggestions: list[AutopsySuggestion]

    @model_validator(mode="after")
    def check_targets(self) -> "ArgumentAnalysis":
        for s in self.suggestions:
            if s.target_sentence is not None and s.target_sentence >= len(self.sentences):
                raise ValueError(
                    f"suggestion targets sentence {s.target_sentence} but only "
                    f"{len(self.sentences)} sentences were classified"
                )
        return self


class AutopsyResponse(BaseModel):
    analysis: ArgumentAnalysis


# ---------------------------------------------------------------------------
# Counterargument coach
# ---------------------------------------------------------------------------

Perspective = Literal["logical", "ethical", "practical"]
PERSPECTIVES: tuple[str, ...] = ("logical", "ethical", "practical")


class Counterargument(_CamelModel):
    perspective: Perspective
    title: str
    argument: str
    why_persuasive: str
    attacks_what: str


class RebuttalCoach(_CamelModel):
    """Guidance for defending the position; never the rebuttal itself."""
    claim_to_defend: str
    missing_evidence: list[str]
    sentence_starters: list[str]
    strategy_tip: str


class CoachResult(_CamelModel):
    counterarguments: list[Counterargument]
    # "rebuttonCoach" is the spelling the browser-era prompt asked for.
    rebuttal_coach: RebuttalCoach = Field(
        validation_alias=AliasChoices("rebuttalCoach", "rebuttonCoach", "rebuttal_coach"),
        serialization_alias="rebuttalCoach",
    )

    @field_validator("counterarguments")
    @classmethod
    def one_per_perspective(cls, v: list[Counterargument]) -> list[Counterargument]:
        if sorted(c.perspective for c in v) != sorted(PERSPECTIVES):
            raise ValueError("expected exactly one logical, one ethical and one practical counterargument")
        return sorted(v, key=lambda c: PERSPECTIVES.index(c.perspective))


class CoachResponse(BaseModel):
    result: CoachResult
