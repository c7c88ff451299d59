"""create saved_critiques table

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19 00:00:00.000000

Bounded per-client critique history, newest first by `seq`.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "saved_critiques",
        sa.Column("seq", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("client_key", sa.String(128), nullable=False),
        sa.Column("persona", sa.String(32), nullable=False),
        sa.Column("input_text", sa.Text(), nullable=False),
        sa.Column("critique", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("seq"),
        sa.UniqueConstraint("client_key", "id", name="uq_saved_critique_client_id"),
    )
    op.create_index("ix_saved_critiques_id", "saved_critiques", ["id"])
    op.create_index("ix_saved_critiques_client_key", "saved_critiques", ["client_key"])


def downgrade() -> None:
    op.drop_index("ix_saved_critiques_client_key", table_name="saved_critiques")
    op.drop_index("ix_saved_critiques_id", table_name="saved_critiques")
    op.drop_table("saved_critiques")
