"""
Scoring service: ask the gateway to score an argument through a forced
tool call, validate the breakdown, and turn it into a ScoreDraft.

Nothing is stored here; the router hands the draft to the ScoreStore only
after the whole oracle round-trip succeeded.
"""
from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from critiquelab.core.config import settings
from critiquelab.core.errors import InvalidOracleResponse
from critiquelab.schemas.common import MAX_TEXT_LENGTH
from critiquelab.schemas.scores import ScoreBreakdown
from critiquelab.services.gateway import AIGatewayClient
from critiquelab.services.score_store import CATEGORIES, ScoreDraft

logger = logging.getLogger(__name__)

TOOL_NAME = "score_argument"

_SYSTEM_PROMPT = (
    "You are an argument scoring engine. Score the text on four categories, "
    "each 0-25: clarity, logic, evidence, defense. For each category give one "
    "sentence of explanation and one actionable suggestion. Be fair but "
    f"rigorous. You MUST respond using the {TOOL_NAME} tool."
)


def _tool_parameters() -> dict:
    properties: dict[str, dict] = {}
    for cat in CATEGORIES:
        properties[f"{cat}_score"] = {"type": "integer", "minimum": 0, "maximum": 25}
    for cat in CATEGORIES:
        properties[f"{cat}_explanation"] = {"type": "string"}
    for cat in CATEGORIES:
        properties[f"{cat}_suggestion"] = {"type": "string"}
    return {
        "type": "object",
        "properties": properties,
        "required": list(properties),
        "additionalProperties": False,
    }


SCORE_TOOL = {
    "type": "function",
    "function": {
        "name": TOOL_NAME,
        "description": "Return the argument score breakdown",
        "parameters": _tool_parameters(),
    },
}


def parse_score_tool_call(message: object) -> ScoreBreakdown:
    """Validate the first tool call of a chat message as a ScoreBreakdown."""
    try:
        arguments = message["tool_calls"][0]["function"]["arguments"]  # type: ignore[index]
    except (KeyError, IndexError, TypeError) as err:
        raise InvalidOracleResponse("no tool call in response") from err

    try:
        data = json.loads(arguments) if isinstance(arguments, str) else arguments
    except ValueError as err:
        raise InvalidOracleResponse("tool call arguments are not valid JSON") from err

    try:
        return ScoreBreakdown.model_validate(data)
    except ValidationError as err:
        logger.error("Score tool call failed validation: %s", err)
        raise InvalidOracleResponse("tool call does not match the score schema") from err


def build_draft(breakdown: ScoreBreakdown, text: str, source: str) -> ScoreDraft:
    return ScoreDraft(
        source=source,
        input_preview=text[: settings.INPUT_PREVIEW_LENGTH],
        total_score=breakdown.total_score,
        **breakdown.model_dump(),
    )


async def score_argument(gateway: AIGatewayClient, text: str) -> ScoreBreakdown:
    message = await gateway.chat(
        settings.AI_SCORING_MODEL,
        [
            {"role": "system", "content": _SYSTEM_PROMPT},
            {"role": "user", "content": f"Score this argument:\n\n{text[:MAX_TEXT_LENGTH]}"},
        ],
        tools=[SCORE_TOOL],
        tool_choice={"type": "function", "function": {"name": TOOL_NAME}},
    )
    return parse_score_tool_call(message)
