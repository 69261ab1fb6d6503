"""ManageController: list, detail and soft-delete of submissions."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from formflow_journeys.answer_store import FlashChannel
from formflow_journeys.constants import (
    DEFAULT_PAGE_LIMIT,
    DELETE_FAILED_MESSAGE,
    DELETE_SUCCESS_MESSAGE,
    NOT_PROVIDED_TEXT,
    RECORD_NOT_FOUND_MESSAGE,
    VIEW_DELETE_CONFIRM,
    VIEW_DETAIL,
    VIEW_LIST,
)
from formflow_journeys.errors import PersistenceError, RecordNotFoundError
from formflow_journeys.models.schema import JourneyDefinition
from formflow_journeys.models.session import (
    ControllerResult,
    NotFoundResult,
    RedirectResult,
    RenderResult,
    SubmissionRecord,
    SummaryRow,
    format_answer,
)
from formflow_journeys.service import SubmissionService

logger = logging.getLogger(__name__)


class ManageController:
    """Back-office handlers for one journey's submissions.

    Args:
        definition: the journey the submissions came from
        service: persistence for that journey
        manage_base: URL of the list page, e.g. ``/manage/feedback``
    """

    def __init__(
        self,
        definition: JourneyDefinition,
        service: SubmissionService,
        manage_base: str,
    ) -> None:
        self._definition = definition
        self._service = service
        self._manage_base = manage_base.rstrip("/")

    def detail_url(self, record_id: str) -> str:
        return f"{self._manage_base}/{record_id}"

    # ------------------------------------------------------------------
    # List / detail
    # ------------------------------------------------------------------

    async def list(
        self,
        db: AsyncSession,
        flash: FlashChannel,
        *,
        limit: int = DEFAULT_PAGE_LIMIT,
        offset: int = 0,
    ) -> RenderResult:
        records, total = await self._service.list_with_count(db, limit=limit, offset=offset)
        messages = flash.pop_messages()
        logger.info("Rendering submission list with %d submissions", total)
        return RenderResult(
            view=VIEW_LIST,
            model={
                "page_heading": self._definition.title,
                "total_count": total,
                "submissions": [
                    {**r.model_dump(mode="json"), "detail_url": self.detail_url(r.id)}
                    for r in records
                ],
                "success_message": messages.success_message,
                "error_message": messages.error_message,
                "form_config": {
                    "form_route": self._manage_base,
                    "email_not_provided": NOT_PROVIDED_TEXT,
                },
            },
        )

    async def detail(
        self, db: AsyncSession, flash: FlashChannel, record_id: str
    ) -> ControllerResult:
        record = await self._service.get_submission(db, record_id)
        if record is None:
            return NotFoundResult(message=RECORD_NOT_FOUND_MESSAGE)

        messages = flash.pop_messages()
        return RenderResult(
            view=VIEW_DETAIL,
            model={
                "page_heading": self._definition.title,
                "submission": record.model_dump(mode="json"),
                "rows": [row.model_dump() for row in self._summary_rows(record)],
                "back_link": self._manage_base,
                "delete_url": f"{self.detail_url(record_id)}/delete",
                "success_message": messages.success_message,
                "error_message": messages.error_message,
            },
        )

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    async def confirm_delete(self, db: AsyncSession, record_id: str) -> ControllerResult:
        record = await self._service.get_submission(db, record_id)
        if record is None:
            return NotFoundResult(message=RECORD_NOT_FOUND_MESSAGE)
        return RenderResult(
            view=VIEW_DELETE_CONFIRM,
            model={
                "submission": record.model_dump(mode="json"),
                "back_link": self.detail_url(record_id),
                "form_action": f"{self.detail_url(record_id)}/delete",
            },
        )

    async def delete(
        self, db: AsyncSession, flash: FlashChannel, record_id: str
    ) -> RedirectResult:
        """Soft-delete; the outcome is reported through the flash banners."""
        try:
            await self._service.delete_submission(db, record_id)
        except (RecordNotFoundError, PersistenceError) as exc:
            logger.error("Failed to delete submission %s: %s", record_id, exc)
            flash.set_error_message(DELETE_FAILED_MESSAGE)
            return RedirectResult(location=self.detail_url(record_id))

        flash.set_success_message(DELETE_SUCCESS_MESSAGE)
        return RedirectResult(location=self._manage_base)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _summary_rows(self, record: SubmissionRecord) -> list[SummaryRow]:
        """One row per persisted question, with an edit link if allow-listed."""
        answers = self._service.answers_for(record)
        mapper = self._service.mapper
        rows = []
        for section in self._definition.sections:
            for q in section.questions:
                if not mapper.is_persisted(q.field_name):
                    continue
                value = answers.get(q.field_name)
                editable = self._definition.edit.get_field(q.url) is not None
                rows.append(
                    SummaryRow(
                        field_name=q.field_name,
                        title=q.title,
                        value=value,
                        display=format_answer(value) if value is not None else NOT_PROVIDED_TEXT,
                        change_link=(
                            f"{self.detail_url(record.id)}/edit/{section.url}/{q.url}"
                            if editable
                            else None
                        ),
                    )
                )
        return rows
