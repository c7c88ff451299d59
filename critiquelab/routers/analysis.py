"""
Argument analysis router.

POST /autopsy   — sentence-level structure breakdown (rate limited per IP)
POST /coach     — logical/ethical/practical counterarguments (rate limited per IP)

Neither endpoint records a score; clients that want one call
/scores/evaluate with `source` set to `autopsy` or `coach`.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from critiquelab.core.rate_limit import enforce_rate_limit
from critiquelab.schemas.analysis import AnalysisRequest, AutopsyResponse, CoachResponse
from critiquelab.schemas.common import ErrorResponse
from critiquelab.services.autopsy import request_autopsy
from critiquelab.services.coach import request_coaching
from critiquelab.services.gateway import AIGatewayClient, get_gateway

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analysis"])

_ORACLE_ERRORS = {
    402: {"model": ErrorResponse, "description": "AI credits exhausted."},
    422: {"model": ErrorResponse, "description": "Text too short/long or unexpected fields."},
    429: {"model": ErrorResponse, "description": "Rate limited (this service or the AI gateway)."},
    502: {"model": ErrorResponse, "description": "AI gateway failed or returned an invalid analysis."},
    503: {"model": ErrorResponse, "description": "AI gateway not configured."},
}


@router.post(
    "/autopsy",
    response_model=AutopsyResponse,
    summary="Classify every sentence as claim, reasoning, evidence, impact or filler",
    dependencies=[Depends(enforce_rate_limit)],
    responses=_ORACLE_ERRORS,
)
async def autopsy(
    payload: AnalysisRequest,
    gateway: AIGatewayClient = Depends(get_gateway),
):
    """
    Returns the classified sentences, a health summary (analysis vs filler
    percentage, missing components, 0–100 strength) and 3–5 suggestions.
    A suggestion's `targetSentence` always indexes into `sentences`.
    """
    logger.info("Processing autopsy: length=%d", len(payload.text))
    analysis = await request_autopsy(gateway, payload.text)
    return AutopsyResponse(analysis=analysis)


@router.post(
    "/coach",
    response_model=CoachResponse,
    summary="Three counterarguments and coaching for the rebuttal",
    dependencies=[Depends(enforce_rate_limit)],
    responses=_ORACLE_ERRORS,
)
async def coach(
    payload: AnalysisRequest,
    gateway: AIGatewayClient = Depends(get_gateway),
):
    """
    Counterarguments come back in the order logical, ethical, practical.
    `rebuttalCoach` suggests what to defend and how to start, but never
    writes the rebuttal.
    """
    logger.info("Processing coach: length=%d", len(payload.text))
    result = await request_coaching(gateway, payload.text)
    return CoachResponse(result=result)
