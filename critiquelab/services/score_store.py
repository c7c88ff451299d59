"""
Score store: the bounded, newest-first history of argument scores for one
client key, plus the aggregate helpers the dashboard reads.

Public API
----------
ScoreStore(db, client_key, max_scores)
    .scores                      → list[ScoreRecord]   (newest first)
    .add_score(draft)            → ScoreRecord
    .delete_score(score_id)      → None                (no-op when absent)
    .import_scores(records)      → list[ScoreRecord]   (replaces everything)
    .get_average_score()         → int
    .get_highest_score()         → int
    .get_category_averages()     → CategoryAverages

chronological(scores)            → list[ScoreRecord]   (oldest first)

Persistence
-----------
Every mutation writes synchronously. Write failures are logged and
swallowed: the in-memory sequence keeps the change even though the
database does not, until a later write succeeds.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, fields, replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from critiquelab.core.config import settings
from critiquelab.core.rounding import round_half_up
from critiquelab.models.argument_score import ArgumentScore

logger = logging.getLogger(__name__)

DEFAULT_CLIENT_KEY = "local"
CATEGORIES = ("clarity", "logic", "evidence", "defense")


# ---------------------------------------------------------------------------
# Record types (plain dataclasses, no ORM)
# ---------------------------------------------------------------------------

@dataclass
class ScoreDraft:
    """Everything a ScoreRecord carries except the generated id and timestamp."""
    source: str
    input_preview: str
    total_score: int
    clarity_score: int
    logic_score: int
    evidence_score: int
    defense_score: int
    clarity_explanation: str = ""
    logic_explanation: str = ""
    evidence_explanation: str = ""
    defense_explanation: str = ""
    clarity_suggestion: str = ""
    logic_suggestion: str = ""
    evidence_suggestion: str = ""
    defense_suggestion: str = ""


@dataclass(kw_only=True)
class ScoreRecord(ScoreDraft):
    """A stored score. `id` and `created_at` are always set explicitly."""
    id: str
    created_at: datetime

    def category_score(self, category: str) -> int:
        return getattr(self, f"{category}_score")


@dataclass
class CategoryAverages:
    clarity: int
    logic: int
    evidence: int
    defense: int


_DRAFT_FIELDS = [f.name for f in fields(ScoreDraft)]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def _ev(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


def as_utc(ts: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything we store is UTC.
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _row_to_record(row: ArgumentScore) -> ScoreRecord:
    values = {name: getattr(row, name) for name in _DRAFT_FIELDS}
    values["source"] = _ev(row.source)
    return ScoreRecord(id=row.id, created_at=as_utc(row.created_at), **values)


def _record_to_row(record: ScoreRecord, client_key: str) -> ArgumentScore:
    values = {name: getattr(record, name) for name in _DRAFT_FIELDS}
    return ArgumentScore(
        id=record.id,
        client_key=client_key,
        created_at=as_utc(record.created_at),
        **values,
    )


def chronological(scores: Iterable[ScoreRecord]) -> list[ScoreRecord]:
    """
    Oldest-first view of a newest-first sequence, ordered by created_at.
    Records sharing a timestamp keep their insertion order.
    """
    return sorted(reversed(list(scores)), key=lambda s: s.created_at)


def _mean(values: list[int]) -> Decimal:
    return Decimal(sum(values)) / Decimal(len(values))


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class ScoreStore:
    """Newest-first score history for a single client key."""

    def __init__(
        self,
        db: Session,
        client_key: str = DEFAULT_CLIENT_KEY,
        max_scores: Optional[int] = None,
    ):
        self.db = db
        self.client_key = client_key
        self.max_scores = max_scores or settings.SCORE_RETENTION
        self._scores: list[ScoreRecord] = self._load()

    @property
    def scores(self) -> list[ScoreRecord]:
        return list(self._scores)

    def __len__(self) -> int:
        return len(self._scores)

    # -- reads ---------------------------------------------------------------

    def _load(self) -> list[ScoreRecord]:
        rows = self.db.scalars(
            select(ArgumentScore)
            .where(ArgumentScore.client_key == self.client_key)
            .order_by(ArgumentScore.seq.desc())
            .limit(self.max_scores)
        ).all()
        return [_row_to_record(r) for r in rows]

    def get_average_score(self) -> int:
        if not self._scores:
            return 0
        return round_half_up(_mean([s.total_score for s in self._scores]))

    def get_highest_score(self) -> int:
        if not self._scores:
            return 0
        return max(s.total_score for s in self._scores)

    def get_category_averages(self) -> CategoryAverages:
        if not self._scores:
            return CategoryAverages(clarity=0, logic=0, evidence=0, defense=0)
        return CategoryAverages(**{
            cat: round_half_up(_mean([s.category_score(cat) for s in self._scores]))
            for cat in CATEGORIES
        })

    # -- mutations -----------------------------------------------------------

    def add_score(self, draft: ScoreDraft) -> ScoreRecord:
        """Stamp id + created_at, prepend, truncate to max_scores, persist."""
        values = {name: getattr(draft, name) for name in _DRAFT_FIELDS}
        values["source"] = _ev(draft.source)
        record = ScoreRecord(id=str(uuid.uuid4()), created_at=_now(), **values)

        self._scores = [record, *self._scores][: self.max_scores]

        try:
            self.db.add(_record_to_row(record, self.client_key))
            self.db.flush()
            self._evict_overflow()
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to save scores for client %s", self.client_key)

        return record

    def delete_score(self, score_id: str) -> None:
        """Remove the first record with this id. Unknown ids are ignored."""
        for i, s in enumerate(self._scores):
            if s.id == score_id:
                del self._scores[i]
                break
        else:
            return

        try:
            self.db.execute(
                delete(ArgumentScore).where(
                    ArgumentScore.client_key == self.client_key,
                    ArgumentScore.id == score_id,
                )
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to delete score %s", score_id)

    def import_scores(self, records: list[ScoreRecord]) -> list[ScoreRecord]:
        """
        Replace the whole history with `records` (newest first), keeping the
        first max_scores. Written as one full-sequence overwrite.
        """
        self._scores = [
            replace(r, created_at=as_utc(r.created_at)) for r in records
        ][: self.max_scores]

        try:
            self.db.execute(
                delete(ArgumentScore).where(ArgumentScore.client_key == self.client_key)
            )
            # Insert oldest first so seq order matches newest-first reads.
            for record in reversed(self._scores):
                self.db.add(_record_to_row(record, self.client_key))
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to import scores for client %s", self.client_key)

        return self.scores

    def _evict_overflow(self) -> None:
        """Delete this client's rows beyond the newest max_scores (by seq)."""
        keep = (
            select(ArgumentScore.seq)
            .where(ArgumentScore.client_key == self.client_key)
            .order_by(ArgumentScore.seq.desc())
            .limit(self.max_scores)
        )
        self.db.execute(
            delete(ArgumentScore)
            .where(
                ArgumentScore.client_key == self.client_key,
                ArgumentScore.seq.not_in(keep.scalar_subquery()),
            )
            .execution_options(synchronize_session=False)
        )
