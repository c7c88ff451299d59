"""
Critique history router — critiques a client chose to keep.

POST   /critique-history              — save a critique (newest 50 kept)
GET    /critique-history              — list (newest first)
GET    /critique-history/{critique_id} — one saved critique
DELETE /critique-history/{critique_id} — remove one (no-op when unknown)
DELETE /critique-history              — remove all

POST /critique never saves on its own; the client posts here when the user
keeps a result.
"""
from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, Response, status

from critiquelab.core.errors import CritiqueNotFoundError
from critiquelab.routers.deps import get_critique_history
from critiquelab.schemas.common import ErrorResponse
from critiquelab.schemas.critique_history import (
    SavedCritiqueCreate,
    SavedCritiqueListResponse,
    SavedCritiqueOut,
)
from critiquelab.services.critique_history import CritiqueHistory, SavedCritiqueRecord

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/critique-history", tags=["critique history"])


def _to_response(record: SavedCritiqueRecord) -> SavedCritiqueOut:
    return SavedCritiqueOut.model_validate(asdict(record))


@router.post(
    "",
    response_model=SavedCritiqueOut,
    status_code=status.HTTP_201_CREATED,
    summary="Save a critique to the history",
    responses={422: {"model": ErrorResponse, "description": "Critique does not match the persona."}},
)
def save_critique(
    payload: SavedCritiqueCreate,
    history: CritiqueHistory = Depends(get_critique_history),
):
    record = history.add_critique(
        payload.input_text,
        payload.critique.model_dump(by_alias=True),
        payload.persona.value,
    )
    logger.info("Saved critique %s (persona=%s)", record.id, record.persona)
    return _to_response(record)


@router.get("", response_model=SavedCritiqueListResponse, summary="List saved critiques (newest first)")
def list_critiques(history: CritiqueHistory = Depends(get_critique_history)):
    items = [_to_response(r) for r in history.critiques]
    return SavedCritiqueListResponse(total=len(items), items=items)


@router.get(
    "/{critique_id}",
    response_model=SavedCritiqueOut,
    summary="Fetch one saved critique",
    responses={404: {"model": ErrorResponse, "description": "No saved critique with this id."}},
)
def get_critique(critique_id: str, history: CritiqueHistory = Depends(get_critique_history)):
    record = history.get_critique(critique_id)
    if record is None:
        raise CritiqueNotFoundError(critique_id)
    return _to_response(record)


@router.delete(
    "/{critique_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete one saved critique (no-op when unknown)",
)
def delete_critique(critique_id: str, history: CritiqueHistory = Depends(get_critique_history)):
    history.delete_critique(critique_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT, summary="Clear the critique history")
def clear_history(history: CritiqueHistory = Depends(get_critique_history)):
    history.clear_history()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
