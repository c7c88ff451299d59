"""
Shared schema primitives used across the API.
"""
import re
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict

MIN_TEXT_LENGTH = 10
MAX_TEXT_LENGTH = 50_000

# Autopsy and coach analyse structure, so they need a bit more to work with.
ANALYSIS_MIN_TEXT_LENGTH = 20
ANALYSIS_MAX_TEXT_LENGTH = 10_000

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")


class ErrorDetail(BaseModel):
    """A single field-level validation error."""
    field: str
    message: str
    type: str


class ErrorResponse(BaseModel):
    """Standard error envelope returned for all 4xx/5xx responses."""
    model_config = ConfigDict(from_attributes=True)

    code: str
    message: str
    details: Optional[dict[str, Any]] = None


def sanitize_text(text: str) -> str:
    """Normalize line endings, drop control characters (keeping \\n and \\t), trim."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return _CONTROL_CHARS.sub("", text).strip()


def validate_submission_text(
    v: Any,
    min_length: int = MIN_TEXT_LENGTH,
    max_length: int = MAX_TEXT_LENGTH,
) -> str:
    """Shared validator for every text sent to the AI gateway."""
    if not isinstance(v, str):
        raise ValueError("text must be a string")
    cleaned = sanitize_text(v)
    if not cleaned:
        raise ValueError("text cannot be empty")
    if len(cleaned) < min_length:
        raise ValueError(
            f"text must be at least {min_length} characters for meaningful critique"
        )
    if len(cleaned) > max_length:
        raise ValueError(f"text exceeds maximum length of {max_length} characters")
    return cleaned
