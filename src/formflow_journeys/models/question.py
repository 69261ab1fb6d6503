"""Question definition models for form journeys.

Each display type maps to a specific UI component and answer coercion rule:

    - single_line_input: one-line text box
    - text_entry: multi-line text area
    - radio: pick exactly one of ``options``
    - select: drop-down list of ``options`` (may start with a blank entry)
    - boolean: yes/no radio pair, coerced to ``bool``
    - multi_field_input: several named text sub-fields, coerced to a dict
    - date: day/month/year sub-fields, coerced to an ISO ``YYYY-MM-DD`` string

The discriminated ``QuestionDefinition`` union uses ``display_type`` as its
discriminator so YAML dicts deserialise straight into the right class.
All question models are frozen: the same instances are shared by the create
journey and the edit journey, and rendering never mutates them.
"""

from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .condition import Predicate
from .validator import Validator


# --- Shared option/field models ---

class Option(BaseModel):
    """A selectable option with a stored value and display text."""

    model_config = ConfigDict(frozen=True)

    value: str
    text: str


class SubField(BaseModel):
    """A named sub-field of a multi_field_input question."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str


# --- Base question type ---

class BaseQuestion(BaseModel):
    """Fields shared by all display types."""

    model_config = ConfigDict(frozen=True)

    field_name: str
    title: str
    question: str
    url: str
    validators: List[Validator] = []
    # AND-ed predicates over the current answers; None means always shown
    condition: Optional[List[Predicate]] = None

    @property
    def is_required(self) -> bool:
        """True if any validator rejects a blank answer."""
        return any(v.rejects_blank for v in self.validators)


# --- Display types ---

class SingleLineInputQuestion(BaseQuestion):
    """One-line free text."""

    display_type: Literal["single_line_input"] = "single_line_input"


class TextEntryQuestion(BaseQuestion):
    """Multi-line free text."""

    display_type: Literal["text_entry"] = "text_entry"


class RadioQuestion(BaseQuestion):
    """Pick exactly one option."""

    display_type: Literal["radio"] = "radio"
    options: List[Option]

    @model_validator(mode="after")
    def _chk(self):
        if not self.options:
            raise ValueError(f"radio question {self.field_name} needs options")
        return self


class SelectQuestion(BaseQuestion):
    """Drop-down list; a leading blank option acts as the placeholder."""

    display_type: Literal["select"] = "select"
    options: List[Option]

    @model_validator(mode="after")
    def _chk(self):
        if not any(o.value for o in self.options):
            raise ValueError(f"select question {self.field_name} needs options")
        return self


class BooleanQuestion(BaseQuestion):
    """Yes/no question; the answer is stored as a bool."""

    display_type: Literal["boolean"] = "boolean"
    options: List[Option] = [
        Option(value="yes", text="Yes"),
        Option(value="no", text="No"),
    ]


class MultiFieldInputQuestion(BaseQuestion):
    """Several named text inputs answered together."""

    display_type: Literal["multi_field_input"] = "multi_field_input"
    fields: List[SubField]


class DateQuestion(BaseQuestion):
    """Day/month/year inputs answered together."""

    display_type: Literal["date"] = "date"


QuestionDefinition = Annotated[
    Union[
        SingleLineInputQuestion,
        TextEntryQuestion,
        RadioQuestion,
        SelectQuestion,
        BooleanQuestion,
        MultiFieldInputQuestion,
        DateQuestion,
    ],
    Field(discriminator="display_type"),
]

# Maps display_type string → Pydantic class for dynamic deserialization from YAML.
question_mapper = {
    "single_line_input": SingleLineInputQuestion,
    "text_entry": TextEntryQuestion,
    "radio": RadioQuestion,
    "select": SelectQuestion,
    "boolean": BooleanQuestion,
    "multi_field_input": MultiFieldInputQuestion,
    "date": DateQuestion,
}
