"""
ArgumentScore — one completed scoring event, scoped to a client key.

`seq` is the insertion order and defines newest-first ordering; `id` is the
public UUID handed to clients, unique per client key. Rows beyond the
retention bound for a client are deleted by the score store on every insert.
"""
from datetime import datetime
from sqlalchemy import Integer, String, Text, DateTime, Enum, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
import enum

from critiquelab.db.base import Base


class ScoreSource(str, enum.Enum):
    critique = "critique"
    coach = "coach"
    autopsy = "autopsy"


class ArgumentScore(Base):
    __tablename__ = "argument_scores"
    __table_args__ = (
        UniqueConstraint("client_key", "id", name="uq_argument_score_client_id"),
    )

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    client_key: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    source: Mapped[str] = mapped_column(
        Enum(ScoreSource, name="score_source_enum"), nullable=False
    )
    input_preview: Mapped[str] = mapped_column(Text, nullable=False, default="")

    total_score: Mapped[int] = mapped_column(Integer, nullable=False)
    clarity_score: Mapped[int] = mapped_column(Integer, nullable=False)
    logic_score: Mapped[int] = mapped_column(Integer, nullable=False)
    evidence_score: Mapped[int] = mapped_column(Integer, nullable=False)
    defense_score: Mapped[int] = mapped_column(Integer, nullable=False)

    clarity_explanation: Mapped[str] = mapped_column(Text, nullable=False, default="")
    logic_explanation: Mapped[str] = mapped_column(Text, nullable=False, default="")
    evidence_explanation: Mapped[str] = mapped_column(Text, nullable=False, default="")
    defense_explanation: Mapped[str] = mapped_column(Text, nullable=False, default="")
    clarity_suggestion: Mapped[str] = mapped_column(Text, nullable=False, default="")
    logic_suggestion: Mapped[str] = mapped_column(Text, nullable=False, default="")
    evidence_suggestion: Mapped[str] = mapped_column(Text, nullable=False, default="")
    defense_suggestion: Mapped[str] = mapped_column(Text, nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
