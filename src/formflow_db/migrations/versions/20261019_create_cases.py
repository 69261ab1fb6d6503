"""Create cases table for the create-a-case journey.

Lead-contact name parts and contact details are nullable; the two yes/no
answers are BOOLEAN and the expected submission date is DATE.

Revision ID: 20261019_cases
Revises: 20261019_feedback
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# revision identifiers, used by Alembic.
revision = "20261019_cases"
down_revision = "20261019_feedback"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "cases",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("case_officer", sa.String(100), nullable=False),
        sa.Column("plan_title", sa.String(2000), nullable=False),
        sa.Column("type_of_application", sa.String(20), nullable=False),
        sa.Column("lpa_name", sa.String(100), nullable=False),
        # Lead contact
        sa.Column("lead_contact_first_name", sa.String(250), nullable=True),
        sa.Column("lead_contact_last_name", sa.String(250), nullable=True),
        sa.Column("lead_contact_email", sa.Text, nullable=True),
        sa.Column("lead_contact_phone", sa.String(50), nullable=True),
        sa.Column("secondary_lpa", sa.Boolean, nullable=False),
        sa.Column("another_contact", sa.Boolean, nullable=False),
        sa.Column("expected_date_of_submission", sa.Date, nullable=False),
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
        "ix_cases_live_created",
        "cases",
        ["created_at"],
        postgresql_where=sa.text("is_deleted = false"),
    )


def downgrade() -> None:
    op.drop_index("ix_cases_live_created", table_name="cases")
    op.drop_table("cases")
