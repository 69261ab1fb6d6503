"""Predicate model used by question and section conditions."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict


class Predicate(BaseModel):
    """A single condition that references a prior answer by field name.

    Operators:
      - eq, ne: equality / inequality
      - in, not_in: membership in a list of values
      - present, absent: whether the field has been answered at all
      - contains: substring / element membership
      - matches: regex match against a text answer
    """

    model_config = ConfigDict(frozen=True)

    field_name: str
    # Drill into a multi_field_input answer
    sub_field: Optional[str] = None
    op: Literal["eq", "ne", "in", "not_in", "present", "absent", "contains", "matches"]
    value: Any = None
