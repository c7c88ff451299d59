"""
Counterargument coach: three counterarguments (logical, ethical, practical)
and guidance for defending against them, without writing the rebuttal.
"""
from __future__ import annotations

from critiquelab.core.config import settings
from critiquelab.schemas.analysis import CoachResult
from critiquelab.services.gateway import AIGatewayClient
from critiquelab.services.oracle_output import (
    extract_json_object,
    message_content,
    validate_output,
)

COACH_TEMPERATURE = 0.5

SYSTEM_PROMPT = (
    "You are a debate sparring partner. Give exactly three counterarguments to "
    "the user's position: one logical, one ethical, one practical. For each, "
    "give a short title, the argument in 2-4 sentences, why it is persuasive "
    "and which part of the position it attacks. Then coach the rebuttal "
    "without writing it: the claim most in need of defence, missing evidence, "
    "3-4 sentence starters and one strategy tip. Respond with a single JSON "
    "object with keys: counterarguments[{perspective, title, argument, "
    "whyPersuasive, attacksWhat}], rebuttalCoach{claimToDefend, "
    "missingEvidence[], sentenceStarters[], strategyTip}."
)


def parse_coach(content: object) -> CoachResult:
    return validate_output(CoachResult, extract_json_object(content), "coach")


async def request_coaching(gateway: AIGatewayClient, text: str) -> CoachResult:
    message = await gateway.chat(
        settings.AI_COACH_MODEL,
        [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": f"Challenge this position:\n\n{text}"},
        ],
        temperature=COACH_TEMPERATURE,
    )
    return parse_coach(message_content(message))
