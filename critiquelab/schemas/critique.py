"""
Critique request / response schemas.

POST /critique → CritiqueRequest → CritiqueResponse

Each persona has its own response shape. The gateway output is validated
against the persona's model before anything reaches the client; wire keys
are camelCase.
"""
from __future__ import annotations

import enum
import logging
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from critiquelab.schemas.common import validate_submission_text

logger = logging.getLogger(__name__)


class Persona(str, enum.Enum):
    demo = "demo"
    free = "free"
    pro_general = "pro_general"
    pro_business = "pro_business"


DEFAULT_PERSONA = Persona.free


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------

class CritiqueRequest(BaseModel):
    """Only `text` and `persona` are accepted; anything else is rejected."""
    model_config = ConfigDict(extra="forbid")

    text: str = Field(
        description="Submission to critique. Control characters are stripped.",
        examples=["Remote work is strictly better for productivity because ..."],
    )
    persona: Persona = Field(
        default=DEFAULT_PERSONA,
        description="Critique voice. Unknown values fall back to `free`.",
    )

    @field_validator("text", mode="before")
    @classmethod
    def clean_text(cls, v: Any) -> str:
        return validate_submission_text(v)

    @field_validator("persona", mode="before")
    @classmethod
    def whitelist_persona(cls, v: Any) -> Persona:
        if isinstance(v, Persona):
            return v
        if isinstance(v, str):
            normalized = v.lower().strip()
            if normalized in Persona.__members__:
                return Persona(normalized)
            logger.warning("Invalid persona attempted: %s", v[:50])
        return DEFAULT_PERSONA


# ---------------------------------------------------------------------------
# Persona-shaped critiques
# ---------------------------------------------------------------------------

StrengthScore = Annotated[int, Field(ge=1, le=10)]


class _CritiqueBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    argument_strength_score: StrengthScore
    closing_statement: str


class DemoCritique(_CritiqueBase):
    """Surface Skeptic."""
    persona: Literal["demo"] = "demo"
    core_claim_under_fire: str
    obvious_weaknesses: list[str]
    what_would_break_this: list[str]


class FreeCritique(_CritiqueBase):
    """Relentless Reviewer."""
    persona: Literal["free"] = "free"
    primary_objection: str
    logical_flaws: list[str]
    weak_assumptions: list[str]
    counterarguments: list[str]
    real_world_failures: list[str]


class ProGeneralCritique(_CritiqueBase):
    """Hostile Expert."""
    persona: Literal["pro_general"] = "pro_general"
    claim_viability: str
    primary_objection: str
    methodological_flaws: list[str]
    logical_flaws: list[str]
    hidden_assumptions: list[str]
    weak_assumptions: list[str]
    counterarguments: list[str]
    real_world_failures: list[str]


class ProBusinessCritique(_CritiqueBase):
    """Unforgiving Investor."""
    persona: Literal["pro_business"] = "pro_business"
    claim_summary: str
    primary_objection: str
    market_reality_check: list[str]
    differentiation_problems: list[str]
    execution_risks: list[str]
    why_this_fails: list[str]
    logical_flaws: list[str]
    weak_assumptions: list[str]
    counterarguments: list[str]
    real_world_failures: list[str]


PERSONA_MODELS: dict[Persona, type[_CritiqueBase]] = {
    Persona.demo: DemoCritique,
    Persona.free: FreeCritique,
    Persona.pro_general: ProGeneralCritique,
    Persona.pro_business: ProBusinessCritique,
}

Critique = Annotated[
    Union[DemoCritique, FreeCritique, ProGeneralCritique, ProBusinessCritique],
    Field(discriminator="persona"),
]


class CritiqueResponse(BaseModel):
    persona: Persona
    critique: Critique
