"""gallery schema

Revision ID: 5b1e7c2a9d04
Revises:
Create Date: 2025-11-18 14:02:11.402913

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5b1e7c2a9d04"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create profiles, submissions and the vote relation."""
    op.create_table(
        "user_profile",
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("display_name", sa.Text(), nullable=False),
        sa.Column("avatar_ref", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("user_id"),
    )
    op.create_table(
        "submission",
        sa.Column("id", sa.String(length=128), nullable=False),
        sa.Column("author_id", sa.String(length=128), nullable=False),
        sa.Column("author_name", sa.Text(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("prompt_text", sa.Text(), nullable=False),
        sa.Column("external_link", sa.Text(), nullable=False),
        sa.Column("thumbnail_ref", sa.Text(), nullable=False),
        sa.Column("vote_count", sa.Integer(), nullable=False),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.CheckConstraint("vote_count >= 0", name="ck_submission_vote_count_non_negative"),
        sa.ForeignKeyConstraint(["author_id"], ["user_profile.user_id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("author_id"),
        sa.UniqueConstraint("order_index"),
    )
    op.create_table(
        "submission_vote",
        sa.Column("submission_id", sa.String(length=128), nullable=False),
        sa.Column("voter_user_id", sa.String(length=128), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["submission_id"], ["submission.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["voter_user_id"], ["user_profile.user_id"]),
        sa.PrimaryKeyConstraint("submission_id", "voter_user_id"),
    )
    op.create_index(
        "ix_submission_vote_voter_user_id",
        "submission_vote",
        ["voter_user_id"],
        unique=False,
    )


def downgrade() -> None:
    """Drop the gallery tables."""
    op.drop_index("ix_submission_vote_voter_user_id", table_name="submission_vote")
    op.drop_table("submission_vote")
    op.drop_table("submission")
    op.drop_table("user_profile")
