"""
Critique history schemas.

POST   /critique-history        → SavedCritiqueCreate → SavedCritiqueOut
GET    /critique-history        → SavedCritiqueListResponse
GET    /critique-history/{id}   → SavedCritiqueOut
"""
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from critiquelab.schemas.common import validate_submission_text
from critiquelab.schemas.critique import Critique, Persona


class SavedCritiqueCreate(BaseModel):
    """
    A critique previously returned by POST /critique, with the text it was
    produced for. The critique must match the persona's shape.
    """
    model_config = ConfigDict(extra="forbid")

    input_text: str = Field(description="The submission that was critiqued.")
    persona: Persona
    critique: Critique

    @field_validator("input_text", mode="before")
    @classmethod
    def clean_text(cls, v: Any) -> str:
        return validate_submission_text(v)

    @model_validator(mode="before")
    @classmethod
    def tag_critique(cls, data: Any) -> Any:
        # The critique body may omit its persona; take it from the envelope.
        if isinstance(data, dict) and isinstance(data.get("critique"), dict):
            critique = dict(data["critique"])
            persona = data.get("persona")
            critique.setdefault("persona", getattr(persona, "value", persona))
            data = {**data, "critique": critique}
        return data

    @model_validator(mode="after")
    def check_persona(self) -> "SavedCritiqueCreate":
        if self.critique.persona != self.persona.value:
            raise ValueError(
                f"critique is shaped for persona {self.critique.persona!r}, "
                f"not {self.persona.value!r}"
            )
        return self


class SavedCritiqueOut(BaseModel):
    id: str
    input_text: str
    persona: Persona
    critique: Critique
    created_at: datetime


class SavedCritiqueListResponse(BaseModel):
    total: int
    items: list[SavedCritiqueOut] = Field(description="Newest first.")
