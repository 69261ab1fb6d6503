"""SubmissionService: persistence and notification for one journey.

Sits between the controllers and ``formflow_db``:

  - translates answers to columns (and back) through :class:`SubmissionMapper`
  - wraps database failures in :class:`PersistenceError`, logging the
    technical detail here so controllers only handle the user message
  - hides ORM rows behind :class:`SubmissionRecord`

Every method takes the request's ``AsyncSession``.  Writes commit inside
the service so a failed commit is reported as a :class:`PersistenceError`
like any other database failure; reads leave the transaction to the caller.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from formflow_db.repository import SubmissionRepository
from formflow_journeys.constants import (
    DEFAULT_PAGE_LIMIT,
    DELETE_FAILED_MESSAGE,
    SAVE_FAILED_MESSAGE,
)
from formflow_journeys.errors import RecordNotFoundError, persistence_error
from formflow_journeys.interfaces import LoggingNotifier, Notifier
from formflow_journeys.mapping import SubmissionMapper
from formflow_journeys.models.schema import JourneyDefinition
from formflow_journeys.models.session import Answers, Submission, SubmissionRecord

logger = logging.getLogger(__name__)


def parse_record_id(record_id: str) -> uuid.UUID | None:
    """Parse a record id from a URL; None if it is not a UUID."""
    try:
        return uuid.UUID(str(record_id))
    except ValueError:
        return None


class SubmissionService:
    """Stores, reads, edits and deletes submissions for a journey.

    Args:
        definition: the journey whose ``persistence`` block drives mapping
        notifier: post-commit notification sink; logs only if omitted
    """

    def __init__(
        self,
        definition: JourneyDefinition,
        notifier: Notifier | None = None,
    ) -> None:
        self._definition = definition
        self._mapper = SubmissionMapper(definition.persistence)
        self._notifier = notifier or LoggingNotifier()
        self._repo = SubmissionRepository.for_table(definition.persistence.table)

    @property
    def mapper(self) -> SubmissionMapper:
        return self._mapper

    # ==================================================================
    # Create
    # ==================================================================

    async def save_submission(self, db: AsyncSession, answers: Answers) -> Submission:
        """Persist and commit a completed answers snapshot as a new record.

        Raises:
            PersistenceError: if the insert or commit fails.
        """
        values = self._mapper.to_persisted(answers)
        try:
            row = await self._repo.create(db, values=values)
            await db.commit()
        except SQLAlchemyError as exc:
            await db.rollback()
            raise persistence_error(
                logger, "Failed to save submission", SAVE_FAILED_MESSAGE, exc,
            ) from exc

        logger.info("Saved submission %s", row.id)
        return Submission(
            id=str(row.id),
            reference=str(row.id),
            answers=dict(answers),
            submitted_at=row.created_at or datetime.now(timezone.utc),
        )

    async def send_notification(self, submission: Submission) -> None:
        """Notify about a committed submission.

        Runs after the record is persisted; a failure is logged and does
        not affect the submission.
        """
        try:
            await self._notifier.notify(submission)
        except Exception:
            logger.exception("Notification failed for submission %s", submission.reference)

    # ==================================================================
    # Read
    # ==================================================================

    async def get_total_submissions(self, db: AsyncSession) -> int:
        return await self._repo.count(db)

    async def list_with_count(
        self,
        db: AsyncSession,
        *,
        limit: int = DEFAULT_PAGE_LIMIT,
        offset: int = 0,
    ) -> tuple[list[SubmissionRecord], int]:
        """Live records (newest first) and the live total from one session."""
        rows, total = await self._repo.list_with_count(db, limit=limit, offset=offset)
        return [self._to_record(row) for row in rows], total

    async def get_submission(
        self,
        db: AsyncSession,
        record_id: str,
        *,
        include_deleted: bool = False,
    ) -> SubmissionRecord | None:
        """Return a record by id, or None if unknown (or soft-deleted)."""
        pk = parse_record_id(record_id)
        if pk is None:
            return None
        row = await self._repo.get_by_id(db, pk, include_deleted=include_deleted)
        return self._to_record(row) if row is not None else None

    def answers_for(self, record: SubmissionRecord) -> Answers:
        """Answers view of a persisted record, for seeding the edit journey."""
        return self._mapper.from_persisted(record.values)

    # ==================================================================
    # Update / delete
    # ==================================================================

    async def update_field(
        self,
        db: AsyncSession,
        record_id: str,
        field_name: str,
        value: Any,
    ) -> SubmissionRecord:
        """Write one answer to its column(s) and commit (``updated_at`` moves too).

        Raises:
            ValueError: if ``field_name`` has no persisted column.
            RecordNotFoundError: if the record is unknown or soft-deleted.
            PersistenceError: if the update fails.
        """
        values = self._mapper.to_columns(field_name, value)
        if values is None:
            raise ValueError(f"Field '{field_name}' is not persisted")
        pk = parse_record_id(record_id)
        if pk is None:
            raise RecordNotFoundError(record_id)

        try:
            row = await self._repo.update_fields(db, pk, values)
            if row is not None:
                await db.commit()
        except SQLAlchemyError as exc:
            await db.rollback()
            raise persistence_error(
                logger,
                f"Failed to update {field_name} on submission {record_id}",
                self._definition.edit.messages.update_failed,
                exc,
            ) from exc

        if row is None:
            raise RecordNotFoundError(record_id)
        logger.info("Updated %s on submission %s", field_name, record_id)
        return self._to_record(row)

    async def delete_submission(self, db: AsyncSession, record_id: str) -> None:
        """Soft-delete a record.

        Raises:
            RecordNotFoundError: if the record is unknown or already deleted.
            PersistenceError: if the update fails.
        """
        pk = parse_record_id(record_id)
        if pk is None:
            raise RecordNotFoundError(record_id)

        try:
            deleted = await self._repo.soft_delete(db, pk)
            if deleted:
                await db.commit()
        except SQLAlchemyError as exc:
            await db.rollback()
            raise persistence_error(
                logger,
                f"Failed to delete submission {record_id}",
                DELETE_FAILED_MESSAGE,
                exc,
            ) from exc

        if not deleted:
            raise RecordNotFoundError(record_id)
        logger.info("Soft-deleted submission %s", record_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _to_record(self, row: Any) -> SubmissionRecord:
        return SubmissionRecord(
            id=str(row.id),
            created_at=row.created_at,
            updated_at=row.updated_at,
            values={column: getattr(row, column, None) for column in self._mapper.columns},
            is_deleted=bool(row.is_deleted),
        )
