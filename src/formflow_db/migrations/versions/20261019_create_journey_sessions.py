"""Create journey_sessions table for server-side session state.

The session cookie keeps only the row id; ``data`` holds in-progress
answers and flash messages.  Expired rows are removed by
``formflow-cleanup``, which filters on the ``expires_at`` index.

Revision ID: 20261019_sessions
Revises: 20261019_cases
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID

# revision identifiers, used by Alembic.
revision = "20261019_sessions"
down_revision = "20261019_cases"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "journey_sessions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "data",
            JSONB,
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
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
        sa.Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
    )

    op.create_index("ix_journey_sessions_expires_at", "journey_sessions", ["expires_at"])


def downgrade() -> None:
    op.drop_index("ix_journey_sessions_expires_at", table_name="journey_sessions")
    op.drop_table("journey_sessions")
