"""EditController: change one field of a persisted submission.

The edit flow reuses the create journey's question and validator
definitions through an edit-mode :class:`Journey`, whose back link and next
target are always the record's detail page.  Only questions on the
journey's edit allow-list can be shown or changed.

GET seeds the edit journey's answers from the record so the form shows
the current value; POST validates just the submitted field and writes it
straight to the record.  Outcomes travel to the detail page through the
manage flash banners; a record that disappeared sends the user back to
the manage list instead.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from formflow_journeys.answer_store import AnswerStore, FlashChannel
from formflow_journeys.constants import VIEW_QUESTION
from formflow_journeys.controllers.pages import question_page
from formflow_journeys.errors import (
    PersistenceError,
    QuestionNotFoundError,
    RecordNotFoundError,
)
from formflow_journeys.journey import Journey
from formflow_journeys.models.mode import EditMode
from formflow_journeys.models.schema import EditableField, JourneyDefinition
from formflow_journeys.models.session import (
    ControllerResult,
    NotFoundResult,
    RedirectResult,
    RenderResult,
)
from formflow_journeys.service import SubmissionService
from formflow_journeys.validation import (
    ValidationFailure,
    extract_raw_value,
    is_blank,
    validate,
)

logger = logging.getLogger(__name__)


class EditController:
    """Edit-mode handlers for one journey's persisted submissions.

    Args:
        definition: the journey whose questions and allow-list apply
        service: persistence for that journey
        manage_base: URL of the manage list, e.g. ``/manage/feedback``
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
        self._messages = definition.edit.messages

    def detail_url(self, record_id: str) -> str:
        return f"{self._manage_base}/{record_id}"

    def journey(self, record_id: str) -> Journey:
        """Edit-mode journey for one record."""
        detail = self.detail_url(record_id)
        return Journey(
            self._definition,
            base_url=f"{detail}/edit",
            mode=EditMode(record_id=record_id, detail_url=detail),
        )

    def _editable(self, journey: Journey, section_url: str, question_url: str):
        """Resolve an allow-listed question; None if unknown or not editable."""
        try:
            question = journey.resolve_question(section_url, question_url)
        except QuestionNotFoundError:
            return None, None
        entry: EditableField | None = self._definition.edit.get_field(question.url)
        if entry is None:
            return None, None
        return question, entry

    # ==================================================================
    # GET
    # ==================================================================

    async def show(
        self,
        db: AsyncSession,
        store: AnswerStore,
        flash: FlashChannel,
        record_id: str,
        section_url: str,
        question_url: str,
    ) -> ControllerResult:
        """Render the edit form for one allow-listed question."""
        record = await self._service.get_submission(db, record_id)
        if record is None:
            logger.warning("Edit requested for missing submission %s", record_id)
            return NotFoundResult(message=self._messages.not_found)

        journey = self.journey(record_id)
        question, _ = self._editable(journey, section_url, question_url)
        if question is None:
            logger.warning("Edit requested for non-editable %s/%s", section_url, question_url)
            return NotFoundResult(message=self._messages.invalid_field)

        answers = self._service.answers_for(record)
        store.set(journey.journey_id, answers)

        page = question_page(
            journey,
            journey.get_section(section_url),
            question,
            answers,
            error=flash.pop_messages().error_message,
            warning_text=self._messages.warning_text,
        )
        model = page.model_dump()
        model["record_id"] = record_id
        return RenderResult(view=VIEW_QUESTION, model=model)

    # ==================================================================
    # POST
    # ==================================================================

    async def submit(
        self,
        db: AsyncSession,
        store: AnswerStore,
        flash: FlashChannel,
        record_id: str,
        section_url: str,
        question_url: str,
        body: Mapping[str, Any],
    ) -> ControllerResult:
        """Validate and write one field, then return to the detail page."""
        journey = self.journey(record_id)
        detail = self.detail_url(record_id)

        question, entry = self._editable(journey, section_url, question_url)
        if question is None:
            logger.warning("Rejected edit of non-editable %s/%s", section_url, question_url)
            flash.set_error_message(self._messages.invalid_field)
            return RedirectResult(location=detail)

        record = await self._service.get_submission(db, record_id)
        if record is None:
            return self._record_gone(flash, record_id)

        raw = extract_raw_value(question, body)
        if not entry.required and is_blank(raw):
            value = None
        else:
            result = validate(question, raw)
            if isinstance(result, ValidationFailure):
                flash.set_error_message(result.message)
                return RedirectResult(
                    location=journey.question_url(journey.get_section(section_url), question),
                )
            value = result.value

        try:
            await self._service.update_field(db, record_id, question.field_name, value)
        except RecordNotFoundError:
            return self._record_gone(flash, record_id)
        except PersistenceError as exc:
            flash.set_error_message(exc.user_message)
            return RedirectResult(location=detail)

        store.clear(journey.journey_id)
        flash.set_success_message(self._messages.updated)
        return RedirectResult(location=journey.next_target(question, {}))

    def _record_gone(self, flash: FlashChannel, record_id: str) -> RedirectResult:
        """Back to the manage list with the not-found banner."""
        logger.warning("Edit submitted for missing submission %s", record_id)
        flash.set_error_message(self._messages.not_found)
        return RedirectResult(location=self._manage_base)
