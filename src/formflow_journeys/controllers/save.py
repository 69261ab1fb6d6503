"""SaveController: the create journey, from start page to success page.

Handlers read and write the user's answers through an :class:`AnswerStore`
and the one-shot submission outcome through a :class:`FlashChannel`; both
wrap the request's journey-session data and are passed in by the route.

The commit path (:meth:`SaveController.save`) moves through::

    AwaitingCompletion → Persisting → Notifying → Committed
                     ↘ Error (persistence failed; answers kept)

Steering never raises: an incomplete journey or an empty session is a
redirect, not an error.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from formflow_journeys.answer_store import AnswerStore, FlashChannel
from formflow_journeys.constants import (
    SUCCESS_SEGMENT,
    VIEW_CHECK_ANSWERS,
    VIEW_QUESTION,
    VIEW_START,
    VIEW_SUCCESS,
)
from formflow_journeys.controllers.pages import question_page
from formflow_journeys.errors import PersistenceError, QuestionNotFoundError
from formflow_journeys.journey import Journey
from formflow_journeys.models.schema import JourneyDefinition
from formflow_journeys.models.session import (
    CheckAnswersPage,
    ControllerResult,
    NotFoundResult,
    RedirectResult,
    RenderResult,
    SummaryRow,
    SummarySection,
    format_answer,
)
from formflow_journeys.service import SubmissionService
from formflow_journeys.validation import ValidationFailure, extract_raw_value, validate

logger = logging.getLogger(__name__)


class SaveController:
    """Create-mode handlers for one journey.

    Args:
        definition: the journey to collect
        service: persistence and notification for that journey
    """

    def __init__(self, definition: JourneyDefinition, service: SubmissionService) -> None:
        self._definition = definition
        self._service = service

    def journey(self, base_url: str | None = None) -> Journey:
        """Create-mode journey mounted at ``base_url`` (default: its route)."""
        return Journey(self._definition, base_url=base_url or self._definition.route)

    # ==================================================================
    # Start / questions
    # ==================================================================

    def start(self, store: AnswerStore, *, base_url: str | None = None) -> RenderResult:
        journey = self.journey(base_url)
        answers = store.get(journey.journey_id)
        logger.info("Displaying start page for journey %s", journey.journey_id)
        return RenderResult(
            view=VIEW_START,
            model={
                "journey_title": journey.title,
                "start_url": journey.first_target(answers),
                "in_progress": bool(answers),
            },
        )

    def show_question(
        self,
        store: AnswerStore,
        section_url: str,
        question_url: str,
        *,
        base_url: str | None = None,
    ) -> ControllerResult:
        """Render one question with the stored answer filled in."""
        journey = self.journey(base_url)
        try:
            question = journey.resolve_question(section_url, question_url)
        except QuestionNotFoundError as exc:
            logger.warning("%s", exc)
            return NotFoundResult(message="Page not found")

        answers = store.get(journey.journey_id)
        section = journey.get_section(section_url)
        page = question_page(journey, section, question, answers)
        return RenderResult(view=VIEW_QUESTION, model=page.model_dump())

    def submit_question(
        self,
        store: AnswerStore,
        section_url: str,
        question_url: str,
        body: Mapping[str, Any],
        *,
        base_url: str | None = None,
    ) -> ControllerResult:
        """Validate one answer; store it and move on, or re-render with the error."""
        journey = self.journey(base_url)
        try:
            question = journey.resolve_question(section_url, question_url)
        except QuestionNotFoundError as exc:
            logger.warning("%s", exc)
            return NotFoundResult(message="Page not found")

        section = journey.get_section(section_url)
        raw = extract_raw_value(question, body)
        result = validate(question, raw)

        if isinstance(result, ValidationFailure):
            answers = store.get(journey.journey_id)
            page = question_page(
                journey, section, question, answers, value=raw, error=result.message,
            )
            return RenderResult(view=VIEW_QUESTION, model=page.model_dump(), status_code=400)

        answers = store.merge(journey.journey_id, {question.field_name: result.value})
        return RedirectResult(location=journey.next_target(question, answers))

    # ==================================================================
    # Check answers
    # ==================================================================

    def check_answers(
        self,
        store: AnswerStore,
        flash: FlashChannel,
        *,
        base_url: str | None = None,
    ) -> RenderResult:
        """Summary of every active question, plus any pending save error."""
        journey = self.journey(base_url)
        answers = store.get(journey.journey_id)
        error = flash.read().error

        sections = []
        for section in journey.active_sections(answers):
            rows = [
                SummaryRow(
                    field_name=q.field_name,
                    title=q.title,
                    value=answers.get(q.field_name),
                    display=format_answer(answers.get(q.field_name)),
                    change_link=journey.question_url(section, q),
                )
                for q in section.questions
                if journey.is_question_active(section, q, answers)
            ]
            sections.append(SummarySection(name=section.name, rows=rows))

        page = CheckAnswersPage(
            journey_title=journey.title,
            sections=sections,
            is_complete=journey.is_complete(answers),
            error=error,
        )
        return RenderResult(view=VIEW_CHECK_ANSWERS, model=page.model_dump())

    # ==================================================================
    # Commit
    # ==================================================================

    async def save(
        self,
        db: AsyncSession,
        store: AnswerStore,
        flash: FlashChannel,
        *,
        base_url: str | None = None,
    ) -> RedirectResult:
        """Commit the journey's answers as a submission."""
        journey = self.journey(base_url)
        answers = store.get(journey.journey_id)

        if not journey.is_complete(answers):
            logger.warning("Journey %s not complete, redirecting to check answers", journey.journey_id)
            return RedirectResult(location=journey.task_list_url)

        if not answers:
            logger.warning("No answers for journey %s, redirecting to start", journey.journey_id)
            return RedirectResult(location=journey.base_url)

        try:
            submission = await self._service.save_submission(db, answers)
        except PersistenceError as exc:
            flash.set_error(exc.user_message)
            return RedirectResult(location=journey.task_list_url)

        await self._service.send_notification(submission)

        flash.store_submission(submission.reference)
        store.clear(journey.journey_id)
        logger.info("Journey %s committed as %s", journey.journey_id, submission.reference)
        return RedirectResult(location=f"{journey.base_url}/{SUCCESS_SEGMENT}")

    def success(self, flash: FlashChannel, *, base_url: str | None = None) -> ControllerResult:
        """Show the reference once; later visits go back to the start."""
        journey = self.journey(base_url)
        outcome = flash.peek()

        if outcome.error:
            logger.warning("Submission error pending, redirecting to check answers")
            flash.clear()
            return RedirectResult(location=journey.task_list_url)

        if not outcome.submitted or not outcome.reference:
            logger.warning("No submission data found, redirecting to start")
            return RedirectResult(location=journey.base_url)

        flash.clear()
        return RenderResult(
            view=VIEW_SUCCESS,
            model={"journey_title": journey.title, "reference": outcome.reference},
        )
