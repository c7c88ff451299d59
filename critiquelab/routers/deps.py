"""
Request-scoped dependencies shared by the client-scoped history routers.
"""
from __future__ import annotations

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from critiquelab.db.base import get_db
from critiquelab.services.critique_history import CritiqueHistory
from critiquelab.services.score_store import DEFAULT_CLIENT_KEY, ScoreStore


def get_client_key(
    x_client_id: str = Header(
        default=DEFAULT_CLIENT_KEY,
        min_length=1,
        max_length=128,
        pattern=r"^[A-Za-z0-9_.:\-]+$",
        description="Opaque id of the browser/device whose history is used.",
    ),
) -> str:
    return x_client_id


def get_score_store(
    client_key: str = Depends(get_client_key),
    db: Session = Depends(get_db),
) -> ScoreStore:
    return ScoreStore(db=db, client_key=client_key)


def get_critique_history(
    client_key: str = Depends(get_client_key),
    db: Session = Depends(get_db),
) -> CritiqueHistory:
    return CritiqueHistory(db=db, client_key=client_key)
