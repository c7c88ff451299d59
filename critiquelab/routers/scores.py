"""
Scores router — the per-client argument score history.

POST   /scores/evaluate   — score text through the AI gateway and store it
POST   /scores            — store an already-scored argument
GET    /scores            — list history (newest first)
GET    /scores/summary    — average / highest / per-category averages
GET    /scores/export     — history in the browser storage format
PUT    /scores/import     — replace history from the browser storage format
DELETE /scores/{score_id} — remove one record (no-op when unknown)
"""
from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, Response, status
from fastapi.concurrency import run_in_threadpool

from critiquelab.core.rate_limit import enforce_rate_limit
from critiquelab.routers.deps import get_score_store
from critiquelab.schemas.common import ErrorResponse
from critiquelab.schemas.scores import (
    CategoryAveragesOut,
    EvaluateRequest,
    ScoreCreateRequest,
    ScoreExport,
    ScoreListResponse,
    ScoreOut,
    ScoreSummaryResponse,
    StoredScore,
)
from critiquelab.services.gateway import AIGatewayClient, get_gateway
from critiquelab.services.score_store import ScoreDraft, ScoreRecord, ScoreStore
from critiquelab.services.scoring import build_draft, score_argument

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scores", tags=["scores"])


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _record_to_response(record: ScoreRecord) -> ScoreOut:
    return ScoreOut.model_validate(record)


def _list_response(records: list[ScoreRecord]) -> ScoreListResponse:
    return ScoreListResponse(
        total=len(records),
        items=[_record_to_response(r) for r in records],
    )


# ---------------------------------------------------------------------------
# POST /scores/evaluate
# ---------------------------------------------------------------------------

@router.post(
    "/evaluate",
    response_model=ScoreOut,
    status_code=status.HTTP_201_CREATED,
    summary="Score an argument with the AI gateway and add it to the history",
    dependencies=[Depends(enforce_rate_limit)],
    responses={
        402: {"model": ErrorResponse, "description": "AI credits exhausted."},
        429: {"model": ErrorResponse, "description": "Rate limited."},
        502: {"model": ErrorResponse, "description": "AI gateway failed or returned an invalid score."},
        503: {"model": ErrorResponse, "description": "AI gateway not configured."},
    },
)
async def evaluate(
    payload: EvaluateRequest,
    gateway: AIGatewayClient = Depends(get_gateway),
    store: ScoreStore = Depends(get_score_store),
):
    """
    Score the text on clarity, logic, evidence and defense (0–25 each).
    The total is the sum of the four. The record is only stored once the
    gateway answer has been fully validated; on any failure the history is
    left untouched.
    """
    breakdown = await score_argument(gateway, payload.text)
    draft = build_draft(breakdown, payload.text, payload.source)
    # The store writes synchronously; keep the commit off the event loop.
    record = await run_in_threadpool(store.add_score, draft)
    logger.info("Stored score %s (total=%d)", record.id, record.total_score)
    return _record_to_response(record)


# ---------------------------------------------------------------------------
# POST /scores
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=ScoreOut,
    status_code=status.HTTP_201_CREATED,
    summary="Add a pre-scored argument to the history",
)
def add_score(payload: ScoreCreateRequest, store: ScoreStore = Depends(get_score_store)):
    """
    Assigns a fresh id and timestamp, prepends the record and drops the
    oldest record once the history exceeds its retention bound.
    """
    record = store.add_score(ScoreDraft(**payload.model_dump()))
    return _record_to_response(record)


# ---------------------------------------------------------------------------
# GET /scores
# ---------------------------------------------------------------------------

@router.get("", response_model=ScoreListResponse, summary="List score history (newest first)")
def list_scores(store: ScoreStore = Depends(get_score_store)):
    return _list_response(store.scores)


@router.get("/summary", response_model=ScoreSummaryResponse, summary="Aggregate score statistics")
def score_summary(store: ScoreStore = Depends(get_score_store)):
    """Averages use round-half-up (70.5 → 71). All values are 0 when empty."""
    return ScoreSummaryResponse(
        count=len(store),
        average_score=store.get_average_score(),
        highest_score=store.get_highest_score(),
        category_averages=CategoryAveragesOut.model_validate(store.get_category_averages()),
    )


# ---------------------------------------------------------------------------
# Export / import
# ---------------------------------------------------------------------------

@router.get(
    "/export",
    response_model=ScoreExport,
    summary="Export history in the browser storage format (camelCase)",
)
def export_scores(store: ScoreStore = Depends(get_score_store)):
    return ScoreExport(scores=[StoredScore.model_validate(asdict(r)) for r in store.scores])


@router.put(
    "/import",
    response_model=ScoreListResponse,
    summary="Replace history from the browser storage format",
)
def import_scores(payload: ScoreExport, store: ScoreStore = Depends(get_score_store)):
    """
    Replaces the whole history. Records must be newest first; anything past
    the retention bound is dropped. Ids and timestamps are kept as given.
    """
    records = [
        ScoreRecord(**s.model_dump(exclude={"id", "created_at"}), id=s.id, created_at=s.created_at)
        for s in payload.scores
    ]
    return _list_response(store.import_scores(records))


# ---------------------------------------------------------------------------
# DELETE /scores/{score_id}
# ---------------------------------------------------------------------------

@router.delete(
    "/{score_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete one score (no-op when unknown)",
)
def delete_score(score_id: str, store: ScoreStore = Depends(get_score_store)):
    store.delete_score(score_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
