"""Validator models attached to question definitions.

Validators are plain data: each one names its ``kind`` and carries the
messages it reports.  The validation pipeline in
:mod:`formflow_journeys.validation` dispatches on ``kind``; the models
themselves perform no checks.

``rejects_blank`` marks the kinds that fail on blank input.  A question
carrying any of them is required; on other questions a blank answer skips
the validators entirely.

The discriminated ``Validator`` union uses ``kind`` as its discriminator so
Pydantic can deserialise YAML dicts directly into the correct type.
"""

from typing import Annotated, ClassVar, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class RequiredValidator(BaseModel):
    """The answer must be present and non-blank."""

    model_config = ConfigDict(frozen=True)
    rejects_blank: ClassVar[bool] = True

    kind: Literal["required"] = "required"
    message: str


class StringValidator(BaseModel):
    """Length bounds on a text answer."""

    model_config = ConfigDict(frozen=True)
    rejects_blank: ClassVar[bool] = False

    kind: Literal["string"] = "string"
    min_length: Optional[int] = None
    min_length_message: Optional[str] = None
    max_length: Optional[int] = None
    max_length_message: Optional[str] = None


class EmailValidator(BaseModel):
    """The answer must look like an email address."""

    model_config = ConfigDict(frozen=True)
    rejects_blank: ClassVar[bool] = False

    kind: Literal["email"] = "email"
    message: str = "Enter an email address in the correct format, like name@example.com"


class OptionsValidator(BaseModel):
    """The answer must be one of the question's option values."""

    model_config = ConfigDict(frozen=True)
    rejects_blank: ClassVar[bool] = False

    kind: Literal["options"] = "options"
    message: str


class DateValidator(BaseModel):
    """Day/month/year sub-fields must form a real calendar date."""

    model_config = ConfigDict(frozen=True)
    rejects_blank: ClassVar[bool] = True

    kind: Literal["date"] = "date"
    message: str
    # Reported when every part is blank; falls back to ``message``
    blank_message: Optional[str] = None
    # Rejects dates after today when true (e.g. date of birth)
    must_be_past: bool = False
    past_message: Optional[str] = None


class MultiFieldRequiredValidator(BaseModel):
    """Every listed sub-field must be non-blank."""

    model_config = ConfigDict(frozen=True)
    rejects_blank: ClassVar[bool] = True

    kind: Literal["multi_field_required"] = "multi_field_required"
    fields: List[str]
    message: str


Validator = Annotated[
    Union[
        RequiredValidator,
        StringValidator,
        EmailValidator,
        OptionsValidator,
        DateValidator,
        MultiFieldRequiredValidator,
    ],
    Field(discriminator="kind"),
]
