"""
SavedCritique: a persona critique the client chose to keep, scoped to a
client key. Same `seq`/`id` split as ArgumentScore.
"""
from datetime import datetime
from typing import Any
from sqlalchemy import JSON, Integer, String, Text, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from critiquelab.db.base import Base


class SavedCritique(Base):
    __tablename__ = "saved_critiques"
    __table_args__ = (
        UniqueConstraint("client_key", "id", name="uq_saved_critique_client_id"),
    )

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    client_key: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    persona: Mapped[str] = mapped_column(String(32), nullable=False)
    input_text: Mapped[str] = mapped_column(Text, nullable=False)
    # camelCase critique body, including its `persona` discriminator.
    critique: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
