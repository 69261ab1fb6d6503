"""View-model builders shared by the create and edit controllers."""

from __future__ import annotations

from typing import Any

from formflow_journeys.journey import Journey
from formflow_journeys.models.question import QuestionDefinition
from formflow_journeys.models.section import Section
from formflow_journeys.models.session import QuestionPage, QuestionPayload


def question_payload(
    question: QuestionDefinition,
    value: Any = None,
    error: str | None = None,
) -> QuestionPayload:
    """Flatten a question definition for the rendering layer."""
    options = getattr(question, "options", None)
    fields = getattr(question, "fields", None)
    return QuestionPayload(
        field_name=question.field_name,
        display_type=question.display_type,
        title=question.title,
        question=question.question,
        options=[o.model_dump() for o in options] if options else None,
        fields=[f.model_dump() for f in fields] if fields else None,
        value=value,
        error=error,
    )


def question_page(
    journey: Journey,
    section: Section,
    question: QuestionDefinition,
    answers: dict[str, Any],
    *,
    value: Any = None,
    error: str | None = None,
    warning_text: str | None = None,
) -> QuestionPage:
    """Build the page model for one question of ``journey``."""
    if value is None:
        value = answers.get(question.field_name)
    return QuestionPage(
        journey_title=journey.title,
        section_name=section.name,
        question=question_payload(question, value, error),
        back_link=journey.previous_target(question, answers),
        form_action=journey.question_url(section, question),
        warning_text=warning_text,
        error_message=error,
    )
