"""Validation pipeline: turns a raw form submission into a stored answer.

``extract_raw_value`` pulls a question's input out of a submitted form body;
``validate`` runs the question's validators in declaration order and, when
all pass, coerces the raw input into the answer type for its display type:

    single_line_input / text_entry / radio → stripped str
    boolean                               → bool ("yes"/"no")
    multi_field_input                      → dict of stripped sub-field values
    date                                   → ISO "YYYY-MM-DD" str

The first failing validator stops the run.  A blank input on a question
whose validators all accept blanks (see ``Validator.rejects_blank``) skips
them and is stored as an explicit empty value, distinct from "not
answered".  Required, date and multi-field-required validators reject
blanks, so a question carrying only one of those still fails when blank.

No I/O happens here.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Union

from formflow_journeys.models.question import (
    BooleanQuestion,
    DateQuestion,
    MultiFieldInputQuestion,
    QuestionDefinition,
)
from formflow_journeys.models.session import AnswerValue
from formflow_journeys.models.validator import (
    DateValidator,
    EmailValidator,
    MultiFieldRequiredValidator,
    OptionsValidator,
    RequiredValidator,
    StringValidator,
    Validator,
)

logger = logging.getLogger(__name__)

# Sub-field ids of a date question; form keys are "<field_name>_<part>".
DATE_PARTS = ("day", "month", "year")

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

_TRUE_VALUES = {"yes", "true"}
_FALSE_VALUES = {"no", "false"}


# ------------------------------------------------------------------
# Results
# ------------------------------------------------------------------

@dataclass(frozen=True)
class ValidationSuccess:
    """The raw input passed every validator; ``value`` is the coerced answer."""

    value: AnswerValue
    ok: bool = True


@dataclass(frozen=True)
class ValidationFailure:
    """A validator rejected the input."""

    field_name: str
    message: str
    ok: bool = False


ValidationResult = Union[ValidationSuccess, ValidationFailure]


# ------------------------------------------------------------------
# Raw input extraction
# ------------------------------------------------------------------

def extract_raw_value(question: QuestionDefinition, body: Mapping[str, Any]) -> Any:
    """Pull a question's raw input out of a submitted form body.

    Single-input questions read ``body[field_name]``.  Multi-field and date
    questions read ``<field_name>_<sub_field>`` keys and return a dict, or
    None when none of the sub-keys were submitted.
    """
    if isinstance(question, MultiFieldInputQuestion):
        return _extract_parts(body, question.field_name, [f.id for f in question.fields])
    if isinstance(question, DateQuestion):
        return _extract_parts(body, question.field_name, DATE_PARTS)
    return body.get(question.field_name)


def _extract_parts(body: Mapping[str, Any], field_name: str, parts) -> dict[str, str] | None:
    keys = {part: f"{field_name}_{part}" for part in parts}
    if not any(key in body for key in keys.values()):
        return None
    return {part: str(body.get(key) or "") for part, key in keys.items()}


# ------------------------------------------------------------------
# Pipeline
# ------------------------------------------------------------------

def validate(question: QuestionDefinition, raw: Any) -> ValidationResult:
    """Run ``question``'s validators against ``raw`` and coerce on success."""
    if is_blank(raw) and not question.is_required:
        return ValidationSuccess(value=_empty_value(question, raw))

    for validator in question.validators:
        message = _check(validator, question, raw)
        if message is not None:
            return ValidationFailure(field_name=question.field_name, message=message)

    try:
        return ValidationSuccess(value=_coerce(question, raw))
    except ValueError as exc:
        return ValidationFailure(field_name=question.field_name, message=str(exc))


def _check(validator: Validator, question: QuestionDefinition, raw: Any) -> str | None:
    """Return the failure message for one validator, or None if it passes."""
    if isinstance(validator, RequiredValidator):
        return validator.message if is_blank(raw) else None

    if isinstance(validator, StringValidator):
        text = _as_text(raw)
        if validator.min_length is not None and len(text) < validator.min_length:
            return validator.min_length_message or (
                f"Enter at least {validator.min_length} characters"
            )
        if validator.max_length is not None and len(text) > validator.max_length:
            return validator.max_length_message or (
                f"Enter {validator.max_length} characters or less"
            )
        return None

    if isinstance(validator, EmailValidator):
        return None if _EMAIL_RE.match(_as_text(raw)) else validator.message

    if isinstance(validator, OptionsValidator):
        allowed = {o.value for o in getattr(question, "options", None) or []}
        return None if _as_text(raw) in allowed else validator.message

    if isinstance(validator, DateValidator):
        if is_blank(raw):
            return validator.blank_message or validator.message
        try:
            parsed = _parse_date(raw)
        except ValueError:
            return validator.message
        if validator.must_be_past and parsed >= date.today():
            return validator.past_message or validator.message
        return None

    if isinstance(validator, MultiFieldRequiredValidator):
        parts = raw if isinstance(raw, dict) else {}
        missing = [f for f in validator.fields if not str(parts.get(f) or "").strip()]
        return validator.message if missing else None

    logger.warning("Unknown validator kind: %s", getattr(validator, "kind", validator))
    return None


# ------------------------------------------------------------------
# Coercion
# ------------------------------------------------------------------

def _coerce(question: QuestionDefinition, raw: Any) -> AnswerValue:
    if isinstance(question, BooleanQuestion):
        if isinstance(raw, bool):
            return raw
        text = _as_text(raw).lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
        raise ValueError("Select yes or no")
    if isinstance(question, DateQuestion):
        try:
            return _parse_date(raw).isoformat()
        except ValueError:
            raise ValueError("Enter a real date") from None
    if isinstance(question, MultiFieldInputQuestion):
        parts = raw if isinstance(raw, dict) else {}
        return {f.id: str(parts.get(f.id) or "").strip() for f in question.fields}
    return _as_text(raw)


def _empty_value(question: QuestionDefinition, raw: Any) -> AnswerValue:
    if isinstance(question, MultiFieldInputQuestion):
        return {f.id: "" for f in question.fields}
    return ""


def _parse_date(raw: Any) -> date:
    """Build a calendar date from day/month/year parts; ValueError if not real."""
    if not isinstance(raw, dict):
        raise ValueError("date input must have day, month and year")
    try:
        return date(int(raw["year"]), int(raw["month"]), int(raw["day"]))
    except (KeyError, TypeError) as exc:
        raise ValueError(str(exc)) from exc


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _as_text(raw: Any) -> str:
    if raw is None:
        return ""
    return str(raw).strip()


def is_blank(raw: Any) -> bool:
    """True for None, whitespace-only text, or a dict of blank parts."""
    if raw is None:
        return True
    if isinstance(raw, bool):
        return False
    if isinstance(raw, dict):
        return all(not str(v or "").strip() for v in raw.values())
    return not str(raw).strip()
