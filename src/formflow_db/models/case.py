"""Case ORM model: one row per case opened through the create-a-case journey.

Lead-contact names arrive as one multi-field answer and are stored one
column per sub-field.  Booleans are real ``BOOLEAN`` columns, and the
expected submission date is a ``DATE``.
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Boolean, Date, Index, String, Text, text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from formflow_db.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Case(Base):
    """A case managed by the back office."""

    __tablename__ = "cases"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # --- Case details ---
    case_officer: Mapped[str] = mapped_column(String(100), nullable=False)
    plan_title: Mapped[str] = mapped_column(String(2000), nullable=False)
    type_of_application: Mapped[str] = mapped_column(String(20), nullable=False)
    lpa_name: Mapped[str] = mapped_column(String(100), nullable=False)

    # --- Lead contact ---
    lead_contact_first_name: Mapped[str | None] = mapped_column(String(250), nullable=True)
    lead_contact_last_name: Mapped[str | None] = mapped_column(String(250), nullable=True)
    lead_contact_email: Mapped[str | None] = mapped_column(Text, nullable=True)
    lead_contact_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    secondary_lpa: Mapped[bool] = mapped_column(Boolean, nullable=False)
    another_contact: Mapped[bool] = mapped_column(Boolean, nullable=False)
    expected_date_of_submission: Mapped[date] = mapped_column(Date, nullable=False)

    # --- Soft delete ---
    is_deleted: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        TIMESTAMP(timezone=True), nullable=True
    )

    # --- Timestamps ---
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    __table_args__ = (
        Index(
            "ix_cases_live_created",
            "created_at",
            postgresql_where=text("is_deleted = false"),
        ),
    )

    def __repr__(self) -> str:
        return f"<Case(id={self.id!s}, plan_title={self.plan_title!r}, deleted={self.is_deleted})>"
