"""Initial schema — users and quiz_results.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── 1. users ────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String, unique=True, index=True, nullable=False),
        sa.Column("first_name", sa.String, nullable=False),
        sa.Column("last_name", sa.String, server_default="", nullable=False),
        sa.Column("phone", sa.String, nullable=True),
        sa.Column("profile_photo_url", sa.String, nullable=True),
        sa.Column("age", sa.Integer, nullable=True),
        sa.Column("location", sa.String, nullable=True),
        sa.Column("occupation", sa.String, nullable=True),
        sa.Column("bio", sa.Text, nullable=True),
        sa.Column(
            "interests",
            postgresql.JSONB,
            nullable=True,
            comment="Array of interest tags",
        ),
        sa.Column(
            "quiz_completed",
            sa.Boolean,
            server_default="false",
            nullable=False,
        ),
        sa.Column("quiz_completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "is_verified",
            sa.Boolean,
            server_default="false",
            nullable=False,
        ),
        sa.Column(
            "is_active",
            sa.Boolean,
            server_default="true",
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )

    # ── 2. quiz_results ─────────────────────────────────────────────
    op.create_table(
        "quiz_results",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            unique=True,
            nullable=False,
        ),
        sa.Column("version", sa.Integer, server_default="1", nullable=False),
        sa.Column(
            "answers",
            postgresql.JSONB,
            nullable=False,
            comment="Validated quiz answers",
        ),
        sa.Column(
            "personality_traits",
            postgresql.JSONB,
            nullable=False,
            comment="12 categorical traits",
        ),
        sa.Column("match_preferences", postgresql.JSONB, nullable=False),
        sa.Column("property_preferences", postgresql.JSONB, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "ix_quiz_results_updated_at", "quiz_results", ["updated_at"]
    )


def downgrade() -> None:
    op.drop_index("ix_quiz_results_updated_at", table_name="quiz_results")
    op.drop_table("quiz_results")
    op.drop_table("users")
