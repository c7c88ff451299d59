"""
Argument autopsy: sentence-by-sentence structure classification.

Public API
----------
request_autopsy(gateway, text)   → ArgumentAnalysis
parse_autopsy(content)           → same, from raw model output
"""
from __future__ import annotations

from critiquelab.core.config import settings
from critiquelab.schemas.analysis import ArgumentAnalysis
from critiquelab.services.gateway import AIGatewayClient
from critiquelab.services.oracle_output import (
    extract_json_object,
    message_content,
    validate_output,
)

AUTOPSY_TEMPERATURE = 0.3

SYSTEM_PROMPT = (
    "You dissect arguments. Split the text into sentences and classify each one "
    "as exactly one of: claim, reasoning, evidence, impact, filler, with a "
    "one-sentence explanation. Then summarise the argument's health: percentage "
    "of analysis vs filler, missing components, a 0-100 strength score and a "
    "count per category. Finish with 3-5 concrete suggestions in plain language, "
    "each typed as add_warrant, add_evidence, add_impact, reduce_filler, "
    "clarify_claim or strengthen_reasoning, optionally pointing at a sentence "
    "index. Respond with a single JSON object with keys: sentences[{text, "
    "category, explanation}], healthSummary{analysisPercentage, "
    "fillerPercentage, missingComponents[], argumentStrengthScore, "
    "breakdown{claims, reasoning, evidence, impact, filler}}, "
    "suggestions[{type, text, targetSentence}]."
)


def parse_autopsy(content: object) -> ArgumentAnalysis:
    return validate_output(ArgumentAnalysis, extract_json_object(content), "autopsy")


async def request_autopsy(gateway: AIGatewayClient, text: str) -> ArgumentAnalysis:
    message = await gateway.chat(
        settings.AI_AUTOPSY_MODEL,
        [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": f"Analyze this argument:\n\n{text}"},
        ],
        temperature=AUTOPSY_TEMPERATURE,
    )
    return parse_autopsy(message_content(message))
