"""Async repositories for submission tables and journey sessions.

All public methods accept an ``AsyncSession`` so the caller controls
transaction boundaries: methods ``flush()`` but never ``commit()``.

Soft-deleted rows are invisible to every read unless ``include_deleted``
is passed explicitly.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from formflow_db.models import SUBMISSION_MODELS, JourneySession
from formflow_db.models.submission import FeedbackSubmission


class SubmissionRepository:
    """Async read/write operations on one submissions table.

    Args:
        model: ORM class of the table; ``FeedbackSubmission`` if omitted
    """

    def __init__(self, model: Any = FeedbackSubmission) -> None:
        self._model = model

    @classmethod
    def for_table(cls, table: str) -> "SubmissionRepository":
        """Repository for a table named in a journey's persistence block."""
        try:
            return cls(SUBMISSION_MODELS[table])
        except KeyError:
            raise ValueError(f"No submission model for table '{table}'") from None

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def create(self, db: AsyncSession, *, values: dict[str, Any]) -> Any:
        """Insert a new row from mapped column values and return it."""
        row = self._model(**values)
        db.add(row)
        await db.flush()  # Populate id and timestamps
        return row

    # ------------------------------------------------------------------
    # Read: single row
    # ------------------------------------------------------------------

    async def get_by_id(
        self,
        db: AsyncSession,
        record_id: uuid.UUID,
        *,
        include_deleted: bool = False,
    ) -> Any | None:
        """Fetch a row by primary key; soft-deleted rows only on request."""
        row = await db.get(self._model, record_id)
        if row is not None and row.is_deleted and not include_deleted:
            return None
        return row

    # ------------------------------------------------------------------
    # Read: multiple rows
    # ------------------------------------------------------------------

    async def count(self, db: AsyncSession) -> int:
        """Number of live rows."""
        stmt = select(func.count()).select_from(self._model).where(
            self._model.is_deleted.is_(False)
        )
        result = await db.execute(stmt)
        return int(result.scalar_one())

    async def list(
        self,
        db: AsyncSession,
        *,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Any]:
        """Live rows, most recent first."""
        stmt = (
            select(self._model)
            .where(self._model.is_deleted.is_(False))
            .order_by(self._model.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    async def list_with_count(
        self,
        db: AsyncSession,
        *,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Any], int]:
        """Live rows plus the live total, read in the caller's transaction."""
        total = await self.count(db)
        rows = await self.list(db, limit=limit, offset=offset)
        return rows, total

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    async def update_fields(
        self,
        db: AsyncSession,
        record_id: uuid.UUID,
        values: dict[str, Any],
    ) -> Any | None:
        """Set the given columns on a live row; None if it does not exist."""
        row = await self.get_by_id(db, record_id)
        if row is None:
            return None
        for column, value in values.items():
            setattr(row, column, value)
        row.updated_at = datetime.now(timezone.utc)
        await db.flush()
        return row

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    async def soft_delete(self, db: AsyncSession, record_id: uuid.UUID) -> bool:
        """Mark a live row deleted.  Returns False if there was none."""
        row = await self.get_by_id(db, record_id)
        if row is None:
            return False
        now = datetime.now(timezone.utc)
        row.is_deleted = True
        row.deleted_at = now
        row.updated_at = now
        await db.flush()
        return True


class JourneySessionRepository:
    """Async operations on the ``journey_sessions`` table."""

    async def get_live(
        self, db: AsyncSession, session_id: uuid.UUID, now: datetime
    ) -> JourneySession | None:
        """The session row if it exists and has not expired."""
        row = await db.get(JourneySession, session_id)
        if row is None or row.expires_at <= now:
            return None
        return row

    async def upsert(
        self,
        db: AsyncSession,
        session_id: uuid.UUID,
        data: dict[str, Any],
        expires_at: datetime,
    ) -> JourneySession:
        """Replace a session's data and push its expiry forward."""
        row = await db.get(JourneySession, session_id)
        if row is None:
            row = JourneySession(id=session_id, data=data, expires_at=expires_at)
            db.add(row)
        else:
            # A new dict so the JSONB change is detected
            row.data = dict(data)
            row.expires_at = expires_at
            row.updated_at = datetime.now(timezone.utc)
        await db.flush()
        return row

    async def delete_expired(self, db: AsyncSession, now: datetime) -> int:
        """Delete every expired session; returns the number removed."""
        result = await db.execute(
            delete(JourneySession).where(JourneySession.expires_at <= now)
        )
        return int(result.rowcount or 0)
