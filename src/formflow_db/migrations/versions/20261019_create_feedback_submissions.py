"""Create feedback_submissions table.

Soft delete is carried by ``is_deleted`` plus ``deleted_at``; a partial
index on live rows serves the manage list and count.

Revision ID: 20261019_feedback
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# revision identifiers, used by Alembic.
revision = "20261019_feedback"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "feedback_submissions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        # Answers
        sa.Column("full_name", sa.String(250), nullable=False),
        sa.Column("email", sa.Text, nullable=True),
        sa.Column("rating", sa.String(20), nullable=False),
        sa.Column("feedback", sa.Text, nullable=False),
        # Soft delete
        sa.Column(
            "is_deleted",
            sa.Boolean,
            nullable=False,
            server_default=sa.text("false"),
        ),
        sa.Column("deleted_at", TIMESTAMP(timezone=True), nullable=True),
        # Timestamps
        sa.Column(
            "created_at",
            TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )

    op.create_index(
        "ix_feedback_live_created",
        "feedback_submissions",
        ["created_at"],
        postgresql_where=sa.text("is_deleted = false"),
    )


def downgrade() -> None:
    op.drop_index("ix_feedback_live_created", table_name="feedback_submissions")
    op.drop_table("feedback_submissions")
