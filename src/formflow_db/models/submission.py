"""FeedbackSubmission ORM model: one row per committed feedback response.

Rows are created once from a completed answers snapshot and afterwards
changed one column at a time by the manage edit flow.  Deletion is soft:
``is_deleted`` / ``deleted_at`` hide the row from default reads.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Index, String, Text, text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from formflow_db.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FeedbackSubmission(Base):
    """A persisted feedback response."""

    __tablename__ = "feedback_submissions"

    # --- Primary key (also the user-facing reference) ---
    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # --- Mapped answer columns ---
    full_name: Mapped[str] = mapped_column(String(250), nullable=False)
    # Null when the respondent chose not to give an email address
    email: Mapped[str | None] = mapped_column(Text, nullable=True)
    rating: Mapped[str] = mapped_column(String(20), nullable=False)
    feedback: Mapped[str] = mapped_column(Text, nullable=False)

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
        # Hot path: list/count live rows newest first
        Index(
            "ix_feedback_live_created",
            "created_at",
            postgresql_where=text("is_deleted = false"),
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<FeedbackSubmission(id={self.id!s}, rating={self.rating!r}, "
            f"deleted={self.is_deleted})>"
        )
