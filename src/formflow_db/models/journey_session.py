"""JourneySession ORM model: server-side state behind the session cookie.

The signed cookie carries only the row id.  ``data`` holds the in-progress
answers of every journey plus pending flash messages, so answer size is
bounded by the column, not by the browser's 4 KB cookie limit.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Index, text
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from formflow_db.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JourneySession(Base):
    """One browser session's journey state."""

    __tablename__ = "journey_sessions"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True)

    data: Mapped[dict] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
        server_default=text("'{}'::jsonb"),
    )

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
    # Rows past this are ignored on read and purged by formflow-cleanup
    expires_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_journey_sessions_expires_at", "expires_at"),
    )

    def __repr__(self) -> str:
        return f"<JourneySession(id={self.id!s}, expires_at={self.expires_at})>"
