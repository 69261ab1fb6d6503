"""Journey: ordered sections of questions, plus navigation over them.

A ``Journey`` binds an immutable :class:`JourneyDefinition` to the values
that change per request:

  - ``base_url``: derived from the request path, because the same definition
    is mounted under the create path (``/feedback``) and the edit path
    (``/manage/feedback/{id}/edit``)
  - ``mode``: ``CreateMode`` or ``EditMode``; back links and next targets
    are pure functions of it

Navigation is recomputed from the answers on every call.  There is no
cached progress flag, so changing an answer that deactivates a later
section removes that section's questions from the completion requirement
on the very next evaluation.

Usage::

    journey = Journey(definition, base_url="/feedback")
    question = journey.resolve_question("personal", "full-name")
    journey.next_target(question, answers)   # "/feedback/personal/want-email"
    journey.is_complete(answers)
"""

from __future__ import annotations

import logging
from typing import Any, Iterator

from formflow_journeys.constants import CHECK_ANSWERS_SEGMENT
from formflow_journeys.errors import QuestionNotFoundError
from formflow_journeys.evaluator import ConditionEvaluator
from formflow_journeys.models.mode import CreateMode, EditMode, JourneyMode
from formflow_journeys.models.question import QuestionDefinition
from formflow_journeys.models.schema import JourneyDefinition
from formflow_journeys.models.section import Section

logger = logging.getLogger(__name__)


class Journey:
    """Navigation over a journey definition for one request.

    Args:
        definition: the loaded journey definition
        base_url: URL prefix the journey's pages live under
        mode: create (default) or edit
        evaluator: condition evaluator; a fresh one if omitted
    """

    def __init__(
        self,
        definition: JourneyDefinition,
        *,
        base_url: str,
        mode: JourneyMode | None = None,
        evaluator: ConditionEvaluator | None = None,
    ) -> None:
        self._definition = definition
        self._base_url = base_url.rstrip("/")
        self._mode = mode if mode is not None else CreateMode()
        self._evaluator = evaluator or ConditionEvaluator()

    # ==================================================================
    # Properties
    # ==================================================================

    @property
    def definition(self) -> JourneyDefinition:
        return self._definition

    @property
    def mode(self) -> JourneyMode:
        return self._mode

    @property
    def is_edit(self) -> bool:
        return isinstance(self._mode, EditMode)

    @property
    def journey_id(self) -> str:
        """Session namespace key; the edit flow uses its own."""
        if self.is_edit:
            return self._definition.edit_journey_id
        return self._definition.id

    @property
    def title(self) -> str:
        if self.is_edit and self._definition.edit_title:
            return self._definition.edit_title
        return self._definition.title

    @property
    def sections(self) -> list[Section]:
        return self._definition.sections

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def task_list_url(self) -> str:
        """The check-your-answers page for this journey."""
        return f"{self._base_url}/{CHECK_ANSWERS_SEGMENT}"

    # ==================================================================
    # Lookup
    # ==================================================================

    def resolve_question(
        self, section_url: str, question_url: str
    ) -> QuestionDefinition:
        """Resolve URL segments to exactly one question.

        Raises:
            QuestionNotFoundError: if either segment is unknown.
        """
        section = self.get_section(section_url)
        if section is not None:
            question = section.get_question(question_url)
            if question is not None:
                return question
        raise QuestionNotFoundError(section_url, question_url)

    def get_section(self, section_url: str) -> Section | None:
        """Return the section with the given URL segment, or None."""
        for section in self.sections:
            if section.url == section_url:
                return section
        return None

    def section_for(self, question: QuestionDefinition) -> Section:
        """Return the section that contains ``question``.

        Raises:
            QuestionNotFoundError: if the question is not part of this journey.
        """
        for section, q in self._iter_questions():
            if q.field_name == question.field_name:
                return section
        raise QuestionNotFoundError("?", question.url)

    def get_question_by_field(self, field_name: str) -> QuestionDefinition | None:
        """Return the question answering ``field_name``, or None."""
        for _, q in self._iter_questions():
            if q.field_name == field_name:
                return q
        return None

    def question_url(self, section: Section, question: QuestionDefinition) -> str:
        """Absolute path of a question page under this journey's base URL."""
        return f"{self._base_url}/{section.url}/{question.url}"

    # ==================================================================
    # Activation
    # ==================================================================

    def is_section_active(self, section: Section, answers: dict[str, Any]) -> bool:
        """A section is active when its condition holds and it has an active question."""
        if not self._evaluator.is_met(section.condition, answers):
            return False
        return any(
            self._evaluator.is_met(q.condition, answers) for q in section.questions
        )

    def is_question_active(
        self,
        section: Section,
        question: QuestionDefinition,
        answers: dict[str, Any],
    ) -> bool:
        """Section condition AND question condition."""
        return self._evaluator.is_met(
            section.condition, answers
        ) and self._evaluator.is_met(question.condition, answers)

    def active_questions(
        self, answers: dict[str, Any]
    ) -> list[tuple[Section, QuestionDefinition]]:
        """Ordered (section, question) pairs that are active for ``answers``."""
        return [
            (section, q)
            for section, q in self._iter_questions()
            if self.is_question_active(section, q, answers)
        ]

    def active_sections(self, answers: dict[str, Any]) -> list[Section]:
        """Sections with at least one active question, in order."""
        return [s for s in self.sections if self.is_section_active(s, answers)]

    # ==================================================================
    # Completion
    # ==================================================================

    def missing_questions(
        self, answers: dict[str, Any]
    ) -> list[tuple[Section, QuestionDefinition]]:
        """Active questions without a present answer."""
        return [
            (section, q)
            for section, q in self.active_questions(answers)
            if q.field_name not in answers
        ]

    def is_complete(self, answers: dict[str, Any]) -> bool:
        """True iff every active question has a present answer."""
        return not self.missing_questions(answers)

    def is_section_complete(self, section: Section, answers: dict[str, Any]) -> bool:
        """True iff every active question in ``section`` has an answer."""
        return all(
            q.field_name in answers
            for q in section.questions
            if self.is_question_active(section, q, answers)
        )

    # ==================================================================
    # Navigation
    # ==================================================================

    def first_target(self, answers: dict[str, Any]) -> str:
        """Path of the first active question, or the task list if none."""
        active = self.active_questions(answers)
        if not active:
            return self.task_list_url
        section, question = active[0]
        return self.question_url(section, question)

    def next_target(
        self, current: QuestionDefinition, answers: dict[str, Any]
    ) -> str:
        """Path to go to after answering ``current``.

        Create mode: the first active question strictly after ``current`` in
        declaration order, else the task list.  Edit mode: always the record
        detail page.
        """
        if isinstance(self._mode, EditMode):
            return self._mode.detail_url

        found = False
        for section, q in self._iter_questions():
            if found and self.is_question_active(section, q, answers):
                return self.question_url(section, q)
            if q.field_name == current.field_name:
                found = True

        if not found:
            logger.warning(
                "next_target: %s is not in journey %s", current.field_name, self.journey_id,
            )
        return self.task_list_url

    def previous_target(
        self, current: QuestionDefinition, answers: dict[str, Any]
    ) -> str:
        """Path of the back link on ``current``'s page.

        Create mode: the last active question strictly before ``current``,
        else the journey's initial back link.  Edit mode: always the record
        detail page.
        """
        if isinstance(self._mode, EditMode):
            return self._mode.detail_url

        previous: str | None = None
        for section, q in self._iter_questions():
            if q.field_name == current.field_name:
                break
            if self.is_question_active(section, q, answers):
                previous = self.question_url(section, q)

        return previous if previous is not None else self._definition.initial_back_link

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _iter_questions(self) -> Iterator[tuple[Section, QuestionDefinition]]:
        """All (section, question) pairs in declaration order."""
        for section in self.sections:
            for q in section.questions:
                yield section, q
