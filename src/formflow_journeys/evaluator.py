"""ConditionEvaluator: decides whether sections and questions are active.

Sections and questions may carry a ``condition``: a list of predicates over
the current answers, AND-ed together.  The journey calls :meth:`is_met`
on every navigation so a changed answer takes effect on the very next
request; nothing is cached.

A predicate that references an answer the user has not given yet is false
(except ``absent``).  This lets the user progress through linear sections
before any conditional branch is reached.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable

from formflow_journeys.models.condition import Predicate

logger = logging.getLogger(__name__)

_MISSING = object()


class ConditionEvaluator:
    """Evaluates predicate lists against a journey's answers."""

    def is_met(
        self,
        predicates: Iterable[Predicate] | None,
        answers: dict[str, Any],
    ) -> bool:
        """Return True if every predicate holds.

        Args:
            predicates: the condition to check; ``None`` means unconditional
            answers: current answers keyed by field name

        Returns:
            True when the condition is absent or all predicates pass.
        """
        if predicates is None:
            return True
        return all(self._eval_predicate(pred, answers) for pred in predicates)

    # ------------------------------------------------------------------
    # Predicate evaluation
    # ------------------------------------------------------------------

    def _eval_predicate(self, pred: Predicate, answers: dict[str, Any]) -> bool:
        """Evaluate a single predicate against the answers dict."""
        answer = answers.get(pred.field_name, _MISSING)

        # Drill into a multi-field answer when a sub-field is named
        if answer is not _MISSING and pred.sub_field is not None:
            if isinstance(answer, dict):
                answer = answer.get(pred.sub_field, _MISSING)
            else:
                answer = _MISSING

        if pred.op == "absent":
            return answer is _MISSING
        if answer is _MISSING:
            return False
        if pred.op == "present":
            return True

        return self._compare(pred.op, answer, pred.value)

    @staticmethod
    def _compare(op: str, answer: Any, value: Any) -> bool:
        """Apply an operator to an answer and an expected value."""
        if op == "eq":
            return answer == value
        if op == "ne":
            return answer != value
        if op == "in":
            return answer in (value or [])
        if op == "not_in":
            return answer not in (value or [])
        if op == "contains":
            if isinstance(answer, (str, list, dict)):
                return value in answer
            return False
        if op == "matches":
            if not isinstance(answer, str):
                return False
            try:
                return re.search(str(value), answer) is not None
            except re.error:
                logger.warning("Invalid regex in predicate: %r", value)
                return False

        logger.warning("Unknown predicate operator: %s", op)
        return False
