"""create argument_scores table

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

Bounded per-client score history. `seq` gives insertion order; the score
store deletes rows beyond the retention bound on every insert.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    score_source_enum = sa.Enum("critique", "coach", "autopsy", name="score_source_enum")
    score_source_enum.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "argument_scores",
        sa.Column("seq", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("client_key", sa.String(128), nullable=False),
        sa.Column("source", sa.Enum(
            "critique", "coach", "autopsy",
            name="score_source_enum", create_type=False,
        ), nullable=False),
        sa.Column("input_preview", sa.Text(), nullable=False),
        sa.Column("total_score", sa.Integer(), nullable=False),
        sa.Column("clarity_score", sa.Integer(), nullable=False),
        sa.Column("logic_score", sa.Integer(), nullable=False),
        sa.Column("evidence_score", sa.Integer(), nullable=False),
        sa.Column("defense_score", sa.Integer(), nullable=False),
        sa.Column("clarity_explanation", sa.Text(), nullable=False),
        sa.Column("logic_explanation", sa.Text(), nullable=False),
        sa.Column("evidence_explanation", sa.Text(), nullable=False),
        sa.Column("defense_explanation", sa.Text(), nullable=False),
        sa.Column("clarity_suggestion", sa.Text(), nullable=False),
        sa.Column("logic_suggestion", sa.Text(), nullable=False),
        sa.Column("evidence_suggestion", sa.Text(), nullable=False),
        sa.Column("defense_suggestion", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("seq"),
        sa.UniqueConstraint("client_key", "id", name="uq_argument_score_client_id"),
    )
    op.create_index("ix_argument_scores_id", "argument_scores", ["id"])
    op.create_index("ix_argument_scores_client_key", "argument_scores", ["client_key"])


def downgrade() -> None:
    op.drop_index("ix_argument_scores_client_key", table_name="argument_scores")
    op.drop_index("ix_argument_scores_id", table_name="argument_scores")
    op.drop_table("argument_scores")
    sa.Enum(name="score_source_enum").drop(op.get_bind(), checkfirst=True)
