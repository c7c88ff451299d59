"""
Turning free-text model output into validated pydantic models.

The gateway may wrap its JSON in a markdown fence or add chatter around it,
so the first {...} block is taken. Anything that does not validate is an
InvalidOracleResponse; nothing is ever partially accepted.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from critiquelab.core.errors import InvalidOracleResponse

logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")

ModelT = TypeVar("ModelT", bound=BaseModel)


def message_content(message: Any) -> Any:
    return message.get("content") if isinstance(message, dict) else None


def extract_json_object(content: Any) -> dict[str, Any]:
    if not isinstance(content, str) or not content.strip():
        raise InvalidOracleResponse("empty response from AI service")

    match = _JSON_OBJECT.search(content)
    if match is None:
        raise InvalidOracleResponse("no JSON object in response")
    try:
        data = json.loads(match.group(0))
    except ValueError as err:
        raise InvalidOracleResponse("response JSON could not be decoded") from err
    if not isinstance(data, dict):
        raise InvalidOracleResponse("response JSON is not an object")
    return data


def validate_output(model: type[ModelT], data: dict[str, Any], label: str) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as err:
        logger.error("%s response failed validation: %s", label, err)
        raise InvalidOracleResponse(f"response does not match the {label} schema") from err
