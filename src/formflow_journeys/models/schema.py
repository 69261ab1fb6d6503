"""Pydantic models for journey definition files.

These models mirror the YAML files in ``formflow_journeys/definitions/``:

    - JourneyDefinition: id, title, routes, sections, plus the two blocks below
    - PersistenceConfig: field-name → column translation for the submission
      mapper (the single source of truth for that translation)
    - EditConfig: the allow-list of fields the edit flow may change, and the
      messages it shows
"""

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, model_validator

from .section import Section


# ---------------------------------------------------------------------------
# Persistence mapping
# ---------------------------------------------------------------------------

class PersistenceConfig(BaseModel):
    """How answers translate into record columns.

    ``table`` names the submissions table the journey writes to.
    ``columns`` maps answer field names to column names, and
    ``sub_columns`` maps a multi-field answer's sub-fields to one column
    each.  Fields listed in ``optional`` persist ``None`` when blank;
    fields listed in ``dates`` hold ISO strings in answers and ``date``
    values in the record.  ``presence_flags`` maps a boolean answer to the
    column whose presence it records: the flag is not persisted itself,
    and when it is false the column is stored as ``None`` regardless of
    any stale answer.
    """

    model_config = ConfigDict(frozen=True)

    table: str
    columns: Dict[str, str]
    sub_columns: Dict[str, Dict[str, str]] = {}
    optional: List[str] = []
    dates: List[str] = []
    presence_flags: Dict[str, str] = {}

    @model_validator(mode="after")
    def _chk(self):
        known = set(self.columns.values())
        for flag, column in self.presence_flags.items():
            if column not in known:
                raise ValueError(f"presence flag {flag} references unknown column {column}")
        for field_name in self.optional:
            if field_name not in self.columns:
                raise ValueError(f"optional field {field_name} has no column")
        for field_name in self.dates:
            if field_name not in self.columns:
                raise ValueError(f"date field {field_name} has no column")
        for field_name in self.sub_columns:
            if field_name in self.columns:
                raise ValueError(f"field {field_name} is mapped twice")
        return self

    def is_persisted(self, field_name: str) -> bool:
        return field_name in self.columns or field_name in self.sub_columns


# ---------------------------------------------------------------------------
# Edit allow-list
# ---------------------------------------------------------------------------

class EditableField(BaseModel):
    """One question the edit flow may change, keyed by its URL segment.

    When ``required`` is false a blank submission clears the column
    instead of running the question's validators.
    """

    model_config = ConfigDict(frozen=True)

    question: str
    required: bool = True


class EditMessages(BaseModel):
    """User-facing messages for the edit flow."""

    model_config = ConfigDict(frozen=True)

    not_found: str = "Submission not found"
    updated: str = "Changes saved successfully"
    update_failed: str = "Your changes could not be saved. Please try again."
    invalid_field: str = "Invalid form field"
    warning_text: str = "Changes made will update the submission immediately and cannot be undone."


class EditConfig(BaseModel):
    """Edit-flow configuration: the allow-list plus messages."""

    model_config = ConfigDict(frozen=True)

    allowed_fields: List[EditableField]
    messages: EditMessages = EditMessages()

    def get_field(self, question_url: str) -> EditableField | None:
        """Return the allow-list entry for a question URL segment, or None."""
        for entry in self.allowed_fields:
            if entry.question == question_url:
                return entry
        return None


# ---------------------------------------------------------------------------
# Journey definition
# ---------------------------------------------------------------------------

class JourneyDefinition(BaseModel):
    """A whole journey definition file."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    edit_title: str | None = None
    # Base route under which the create journey is mounted (e.g. /feedback)
    route: str
    initial_back_link: str
    # Base route of the list/detail/edit pages; None mounts none
    manage_route: str | None = None
    # Also guard the create journey with the manage key (back-office journeys)
    requires_manage_key: bool = False
    sections: List[Section]
    persistence: PersistenceConfig
    edit: EditConfig

    @model_validator(mode="after")
    def _chk(self):
        section_urls: set[str] = set()
        field_names: set[str] = set()
        url_to_field: dict[str, str] = {}
        for section in self.sections:
            if section.url in section_urls:
                raise ValueError(f"Duplicate section url '{section.url}' in journey '{self.id}'")
            section_urls.add(section.url)
            for q in section.questions:
                if q.field_name in field_names:
                    raise ValueError(f"Duplicate field_name '{q.field_name}' in journey '{self.id}'")
                field_names.add(q.field_name)
                url_to_field[q.url] = q.field_name

        persisted = [*self.persistence.columns, *self.persistence.sub_columns]
        for field_name in persisted:
            if field_name not in field_names:
                raise ValueError(f"Persisted field '{field_name}' is not a question in '{self.id}'")

        for entry in self.edit.allowed_fields:
            field_name = url_to_field.get(entry.question)
            if field_name is None:
                raise ValueError(f"Editable question '{entry.question}' is not in '{self.id}'")
            if not self.persistence.is_persisted(field_name):
                raise ValueError(
                    f"Editable question '{entry.question}' has no persisted column in '{self.id}'"
                )
        return self

    @property
    def edit_journey_id(self) -> str:
        """Session namespace for the edit flow, distinct from the create flow."""
        return f"{self.id}-edit"
