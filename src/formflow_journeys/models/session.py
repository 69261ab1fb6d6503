"""Session and submission models: the contract between controllers and callers.

These models define what the controllers read from and write to the user's
session, and what they return to the routing layer.  They are intentionally
decoupled from the ORM models in ``formflow_db`` so that routes never see
database internals.

Controller outcomes:
  - RenderResult: render a view with a model
  - RedirectResult: redirect the browser (post/redirect/get)
  - NotFoundResult: render a 404 page

``ControllerResult`` covers all three so callers can dispatch on ``type``.
"""

from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel

# Answers keyed by field name.  Dates are ISO strings, multi-field answers
# are dicts of sub-field id → text.  Absent keys mean "not answered".
AnswerValue = str | bool | dict[str, str]
Answers = dict[str, AnswerValue]


# ------------------------------------------------------------------
# Session side-channels
# ------------------------------------------------------------------

class SubmissionFlash(BaseModel):
    """One-shot outcome of a portal commit, carried across the redirect."""

    reference: str | None = None
    submitted: bool = False
    error: str | None = None


class ManageFlash(BaseModel):
    """One-shot success/error banner for the manage pages."""

    success_message: str | None = None
    error_message: str | None = None


# ------------------------------------------------------------------
# Submissions
# ------------------------------------------------------------------

class Submission(BaseModel):
    """A committed response, as returned by the submission service."""

    id: str
    reference: str
    answers: Answers
    submitted_at: datetime


class SubmissionRecord(BaseModel):
    """Public view of a persisted record for list/detail pages.

    Maps from the ORM row of the journey's table but exposes only the
    mapped columns and timestamps.
    """

    id: str
    created_at: datetime
    updated_at: datetime
    values: dict[str, Any]
    is_deleted: bool = False


# ------------------------------------------------------------------
# Render payloads
# ------------------------------------------------------------------

class QuestionPayload(BaseModel):
    """Flattened question for the rendering layer.

    Strips validators and conditions and presents only what the UI needs,
    plus the current answer and any inline validation error.
    """

    field_name: str
    display_type: str
    title: str
    question: str
    # [{value, text}] for radio/boolean
    options: list[dict] | None = None
    # [{id, label}] for multi_field_input
    fields: list[dict] | None = None
    value: Any = None
    error: str | None = None


class QuestionPage(BaseModel):
    """View model for a single question page."""

    journey_title: str
    section_name: str
    question: QuestionPayload
    back_link: str
    form_action: str
    warning_text: str | None = None
    error_message: str | None = None


class SummaryRow(BaseModel):
    """One row on the check-your-answers page."""

    field_name: str
    title: str
    value: Any = None
    display: str
    change_link: str | None = None


class SummarySection(BaseModel):
    """An active section and its answered rows."""

    name: str
    rows: list[SummaryRow]


class CheckAnswersPage(BaseModel):
    """View model for the check-your-answers page."""

    journey_title: str
    sections: list[SummarySection]
    is_complete: bool
    error: str | None = None


# ------------------------------------------------------------------
# Controller outcomes
# ------------------------------------------------------------------

class RenderResult(BaseModel):
    """Render ``view`` with ``model``."""

    type: Literal["render"] = "render"
    view: str
    model: dict[str, Any]
    status_code: int = 200


class RedirectResult(BaseModel):
    """Redirect to ``location`` (303 See Other)."""

    type: Literal["redirect"] = "redirect"
    location: str


class NotFoundResult(BaseModel):
    """Render a 404 page with a safe message."""

    type: Literal["not_found"] = "not_found"
    message: str


ControllerResult = RenderResult | RedirectResult | NotFoundResult


def format_answer(value: Any) -> str:
    """Human-readable rendering of a stored answer for summaries."""
    if value is None:
        return "Not provided"
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, dict):
        return ", ".join(str(v) for v in value.values() if v)
    if isinstance(value, date):
        return value.isoformat()
    return str(value)
