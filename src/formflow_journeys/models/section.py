"""Section model: a named, ordered, optionally conditional group of questions."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, model_validator

from .condition import Predicate
from .question import QuestionDefinition


class Section(BaseModel):
    """A group of questions sharing one URL segment.

    ``condition`` is a list of AND-ed predicates over the current answers.
    When it is not met, the whole section (and its questions) is inactive.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    url: str
    questions: List[QuestionDefinition]
    condition: Optional[List[Predicate]] = None

    @model_validator(mode="after")
    def _chk(self):
        seen: set[str] = set()
        for q in self.questions:
            if q.url in seen:
                raise ValueError(f"Duplicate question url '{q.url}' in section '{self.url}'")
            seen.add(q.url)
        return self

    def get_question(self, url: str) -> QuestionDefinition | None:
        """Return the question with the given URL segment, or None."""
        for q in self.questions:
            if q.url == url:
                return q
        return None
