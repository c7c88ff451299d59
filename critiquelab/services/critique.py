"""
Critique service: persona prompt → gateway → validated persona critique.

Public API
----------
request_critique(gateway, text, persona)   → DemoCritique | FreeCritique | ...
parse_critique(content, persona)           → same, from raw model output
"""
from __future__ import annotations

from critiquelab.core.config import settings
from critiquelab.schemas.critique import PERSONA_MODELS, Persona
from critiquelab.services.gateway import AIGatewayClient
from critiquelab.services.oracle_output import (
    extract_json_object,
    message_content,
    validate_output,
)

_BASE_PROMPT = (
    "You are CritiqueLab, an adversarial reviewer. Challenge the submission's "
    "logic, assumptions, evidence and structure. Do not praise it and do not "
    "rewrite it. Score argument strength from 1 to 10. "
    "End the closing statement with \"Prove me wrong.\""
)

# Keys each persona must return, in camelCase, as a JSON object.
_PERSONA_PROMPTS: dict[Persona, str] = {
    Persona.demo: (
        "Persona: Surface Skeptic. Keep it short and non-technical. Respond with "
        "JSON keys: coreClaimUnderFire, obviousWeaknesses[], whatWouldBreakThis[], "
        "argumentStrengthScore, closingStatement."
    ),
    Persona.free: (
        "Persona: Relentless Reviewer. Respond with JSON keys: primaryObjection, "
        "logicalFlaws[], weakAssumptions[], counterarguments[], realWorldFailures[], "
        "argumentStrengthScore, closingStatement."
    ),
    Persona.pro_general: (
        "Persona: Hostile Expert. Respond with JSON keys: claimViability, "
        "primaryObjection, methodologicalFlaws[], logicalFlaws[], hiddenAssumptions[], "
        "weakAssumptions[], counterarguments[], realWorldFailures[], "
        "argumentStrengthScore, closingStatement."
    ),
    Persona.pro_business: (
        "Persona: Unforgiving Investor. Respond with JSON keys: claimSummary, "
        "primaryObjection, marketRealityCheck[], differentiationProblems[], "
        "executionRisks[], whyThisFails[], logicalFlaws[], weakAssumptions[], "
        "counterarguments[], realWorldFailures[], argumentStrengthScore, "
        "closingStatement."
    ),
}


def system_prompt(persona: Persona) -> str:
    return f"{_BASE_PROMPT}\n\n{_PERSONA_PROMPTS[persona]}"


def parse_critique(content: object, persona: Persona):
    """
    Pull the first {...} block out of the model output (it may be wrapped in
    a markdown fence) and validate it against the persona's schema.
    """
    data = extract_json_object(content)
    # The persona comes from the request, never from the model output.
    data.pop("persona", None)
    return validate_output(PERSONA_MODELS[persona], data, persona.value)


async def request_critique(gateway: AIGatewayClient, text: str, persona: Persona):
    message = await gateway.chat(
        settings.AI_CRITIQUE_MODEL,
        [
            {"role": "system", "content": system_prompt(persona)},
            {"role": "user", "content": f"Analyze and critique this submission:\n\n{text}"},
        ],
    )
    return parse_critique(message_content(message), persona)
