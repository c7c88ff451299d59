"""
Critique router.

POST /critique   — persona critique of a submission (rate limited per IP)
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from critiquelab.core.rate_limit import enforce_rate_limit
from critiquelab.schemas.common import ErrorResponse
from critiquelab.schemas.critique import CritiqueRequest, CritiqueResponse
from critiquelab.services.critique import request_critique
from critiquelab.services.gateway import AIGatewayClient, get_gateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/critique", tags=["critique"])


@router.post(
    "",
    response_model=CritiqueResponse,
    summary="Adversarial critique in the selected persona's voice",
    dependencies=[Depends(enforce_rate_limit)],
    responses={
        402: {"model": ErrorResponse, "description": "AI credits exhausted."},
        422: {"model": ErrorResponse, "description": "Text too short/long or unexpected fields."},
        429: {"model": ErrorResponse, "description": "Rate limited (this service or the AI gateway)."},
        502: {"model": ErrorResponse, "description": "AI gateway failed or returned an invalid critique."},
        503: {"model": ErrorResponse, "description": "AI gateway not configured."},
    },
)
async def critique(
    payload: CritiqueRequest,
    gateway: AIGatewayClient = Depends(get_gateway),
):
    """
    Send the submission to the AI gateway with the persona's prompt and
    return the persona-shaped critique.

    ### Personas
    | Persona | Voice |
    |---|---|
    | `demo`         | Surface Skeptic |
    | `free`         | Relentless Reviewer (default) |
    | `pro_general`  | Hostile Expert |
    | `pro_business` | Unforgiving Investor |

    The response is validated against the persona's schema; a mismatch is a
    502 `INVALID_ORACLE_RESPONSE`. Failures are never retried.
    """
    logger.info("Processing critique: length=%d persona=%s", len(payload.text), payload.persona.value)
    result = await request_critique(gateway, payload.text, payload.persona)
    return CritiqueResponse(persona=payload.persona, critique=result)
