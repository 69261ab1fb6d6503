"""SubmissionMapper: translates between answers and record columns.

The translation is declared once, in the journey's ``persistence`` block,
and used in both directions so the create flow and the edit flow can never
disagree about column names.

Round trips hold for every field with a persisted counterpart::

    from_persisted(to_persisted(answers))  keeps each mapped answer
    to_persisted(from_persisted(record))   keeps each column it read

Multi-field answers listed under ``sub_columns`` spread over one column
per sub-field; date answers are ISO strings on the answers side and
``datetime.date`` on the record side.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping

from formflow_journeys.models.schema import PersistenceConfig
from formflow_journeys.models.session import Answers


class SubmissionMapper:
    """Bidirectional answers ↔ columns translation for one journey."""

    def __init__(self, config: PersistenceConfig) -> None:
        self._config = config

    @property
    def table(self) -> str:
        return self._config.table

    @property
    def columns(self) -> list[str]:
        """Mapped column names in declaration order, sub-field columns last."""
        names = list(self._config.columns.values())
        for sub in self._config.sub_columns.values():
            names.extend(sub.values())
        return names

    def column_for(self, field_name: str) -> str | None:
        """Column that stores a single-column field, or None."""
        return self._config.columns.get(field_name)

    def is_persisted(self, field_name: str) -> bool:
        return self._config.is_persisted(field_name)

    def to_columns(self, field_name: str, value: Any) -> dict[str, Any] | None:
        """Column values for one answer, or None if the field is not persisted.

        Used by the edit flow: a blank value clears its column(s).
        """
        if field_name in self._config.sub_columns:
            parts = value if isinstance(value, Mapping) else {}
            return {
                column: _blank_to_none(parts.get(sub))
                for sub, column in self._config.sub_columns[field_name].items()
            }
        column = self._config.columns.get(field_name)
        if column is None:
            return None
        return {column: self._column_value(field_name, value)}

    def to_persisted(self, answers: Mapping[str, Any]) -> dict[str, Any]:
        """Column values for a new record.

        Unanswered fields are left out, optional blank fields become None,
        and a false presence flag forces its column to None.
        """
        values: dict[str, Any] = {}
        for field_name, column in self._config.columns.items():
            if field_name in self._config.optional or field_name in answers:
                values[column] = self._column_value(field_name, answers.get(field_name))

        for field_name in self._config.sub_columns:
            if field_name in answers:
                values.update(self.to_columns(field_name, answers[field_name]))

        for flag, column in self._config.presence_flags.items():
            if answers.get(flag) is False:
                values[column] = None

        return values

    def from_persisted(self, record: Any) -> Answers:
        """Answers for a persisted record (a mapping or an ORM row).

        Null columns produce no answer; presence flags are derived from
        whether their column is non-null.
        """
        answers: Answers = {}
        for field_name, column in self._config.columns.items():
            value = _read(record, column)
            if isinstance(value, date):
                value = value.isoformat()
            if value is not None:
                answers[field_name] = value

        for field_name, sub_columns in self._config.sub_columns.items():
            parts = {sub: _read(record, column) for sub, column in sub_columns.items()}
            if any(v is not None for v in parts.values()):
                answers[field_name] = {sub: v or "" for sub, v in parts.items()}

        for flag, column in self._config.presence_flags.items():
            answers[flag] = _read(record, column) is not None

        return answers

    def _column_value(self, field_name: str, value: Any) -> Any:
        if field_name in self._config.optional and value in (None, ""):
            return None
        if field_name in self._config.dates:
            if value in (None, ""):
                return None
            return value if isinstance(value, date) else date.fromisoformat(value)
        return value


def _blank_to_none(value: Any) -> Any:
    if value is None or not str(value).strip():
        return None
    return value


def _read(record: Any, column: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(column)
    return getattr(record, column, None)
