"""
Critique history: the newest-first list of critiques a client kept.

Public API
----------
CritiqueHistory(db, client_key, max_items)
    .critiques                               → list[SavedCritiqueRecord]
    .add_critique(input_text, critique, persona) → SavedCritiqueRecord
    .get_critique(critique_id)               → SavedCritiqueRecord | None
    .delete_critique(critique_id)            → None   (no-op when absent)
    .clear_history()                         → None

Writes follow the score store: synchronous, and a failed write is rolled
back and logged while the in-memory list keeps the change.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from critiquelab.core.config import settings
from critiquelab.models.saved_critique import SavedCritique
from critiquelab.services.score_store import DEFAULT_CLIENT_KEY, as_utc

logger = logging.getLogger(__name__)


@dataclass
class SavedCritiqueRecord:
    id: str
    input_text: str
    persona: str
    critique: dict[str, Any]
    created_at: datetime


def _row_to_record(row: SavedCritique) -> SavedCritiqueRecord:
    return SavedCritiqueRecord(
        id=row.id,
        input_text=row.input_text,
        persona=row.persona,
        critique=dict(row.critique),
        created_at=as_utc(row.created_at),
    )


class CritiqueHistory:
    def __init__(
        self,
        db: Session,
        client_key: str = DEFAULT_CLIENT_KEY,
        max_items: Optional[int] = None,
    ):
        self.db = db
        self.client_key = client_key
        self.max_items = max_items or settings.CRITIQUE_HISTORY_RETENTION
        self._critiques: list[SavedCritiqueRecord] = self._load()

    @property
    def critiques(self) -> list[SavedCritiqueRecord]:
        return list(self._critiques)

    def __len__(self) -> int:
        return len(self._critiques)

    def _load(self) -> list[SavedCritiqueRecord]:
        rows = self.db.scalars(
            select(SavedCritique)
            .where(SavedCritique.client_key == self.client_key)
            .order_by(SavedCritique.seq.desc())
            .limit(self.max_items)
        ).all()
        return [_row_to_record(r) for r in rows]

    def get_critique(self, critique_id: str) -> Optional[SavedCritiqueRecord]:
        return next((c for c in self._critiques if c.id == critique_id), None)

    def add_critique(
        self, input_text: str, critique: dict[str, Any], persona: str
    ) -> SavedCritiqueRecord:
        """Prepend a new record and keep only the newest max_items."""
        record = SavedCritiqueRecord(
            id=str(uuid.uuid4()),
            input_text=input_text,
            persona=persona,
            critique=critique,
            created_at=datetime.now(tz=timezone.utc),
        )
        self._critiques = [record, *self._critiques][: self.max_items]

        try:
            self.db.add(SavedCritique(client_key=self.client_key, **vars(record)))
            self.db.flush()
            self._evict_overflow()
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to save critique history for client %s", self.client_key)

        return record

    def delete_critique(self, critique_id: str) -> None:
        if self.get_critique(critique_id) is None:
            return
        self._critiques = [c for c in self._critiques if c.id != critique_id]

        try:
            self.db.execute(
                delete(SavedCritique).where(
                    SavedCritique.client_key == self.client_key,
                    SavedCritique.id == critique_id,
                )
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to delete saved critique %s", critique_id)

    def clear_history(self) -> None:
        self._critiques = []

        try:
            self.db.execute(
                delete(SavedCritique).where(SavedCritique.client_key == self.client_key)
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to clear critique history for client %s", self.client_key)

    def _evict_overflow(self) -> None:
        keep = (
            select(SavedCritique.seq)
            .where(SavedCritique.client_key == self.client_key)
            .order_by(SavedCritique.seq.desc())
            .limit(self.max_items)
        )
        self.db.execute(
            delete(SavedCritique)
            .where(
                SavedCritique.client_key == self.client_key,
                SavedCritique.seq.not_in(keep.scalar_subquery()),
            )
            .execution_options(synchronize_session=False)
        )
