"""Per-user answer storage over the journey session.

Both classes wrap the request's journey-session data (loaded from
``journey_sessions`` by ``formflow_server.sessions``) and are built fresh
for every request.  Layout::

    {
      "journeys": {journey_id: {field_name: value, ...}},
      "submission": {"reference": ..., "submitted": ..., "error": ...},
      "manage_flash": {"success_message": ..., "error_message": ...},
    }

Two tabs on one session share the same ``journeys`` entry; the last write
wins.
"""

from __future__ import annotations

import logging
from typing import Any, MutableMapping

from formflow_journeys.models.session import Answers, ManageFlash, SubmissionFlash

logger = logging.getLogger(__name__)

_JOURNEYS_KEY = "journeys"
_SUBMISSION_KEY = "submission"
_MANAGE_FLASH_KEY = "manage_flash"


class AnswerStore:
    """In-progress answers keyed by journey id."""

    def __init__(self, session: MutableMapping[str, Any]) -> None:
        self._session = session

    def _journeys(self) -> dict[str, Answers]:
        return self._session.setdefault(_JOURNEYS_KEY, {})

    def get(self, journey_id: str) -> Answers:
        """Return a copy of the journey's answers ({} when none)."""
        return dict(self._session.get(_JOURNEYS_KEY, {}).get(journey_id) or {})

    def set(self, journey_id: str, answers: Answers) -> None:
        """Replace the journey's answers wholesale."""
        journeys = dict(self._journeys())
        journeys[journey_id] = dict(answers)
        self._session[_JOURNEYS_KEY] = journeys

    def merge(self, journey_id: str, updates: Answers) -> Answers:
        """Merge ``updates`` into the journey's answers and return the result."""
        answers = {**self.get(journey_id), **updates}
        self.set(journey_id, answers)
        return answers

    def clear(self, journey_id: str) -> None:
        """Drop the journey's answers."""
        journeys = dict(self._session.get(_JOURNEYS_KEY, {}))
        if journeys.pop(journey_id, None) is not None:
            logger.debug("Cleared answers for journey %s", journey_id)
        self._session[_JOURNEYS_KEY] = journeys


class FlashChannel:
    """One-shot messages carried across a redirect."""

    def __init__(self, session: MutableMapping[str, Any]) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Portal submission outcome
    # ------------------------------------------------------------------

    def store_submission(self, reference: str) -> None:
        self._session[_SUBMISSION_KEY] = SubmissionFlash(
            reference=reference, submitted=True,
        ).model_dump()

    def set_error(self, message: str) -> None:
        self._session[_SUBMISSION_KEY] = SubmissionFlash(error=message).model_dump()

    def peek(self) -> SubmissionFlash:
        """Return the submission outcome without clearing it."""
        return SubmissionFlash(**(self._session.get(_SUBMISSION_KEY) or {}))

    def read(self) -> SubmissionFlash:
        """Return the submission outcome and clear it."""
        return SubmissionFlash(**(self._session.pop(_SUBMISSION_KEY, None) or {}))

    def clear(self) -> None:
        self._session.pop(_SUBMISSION_KEY, None)

    # ------------------------------------------------------------------
    # Manage banners
    # ------------------------------------------------------------------

    def set_success_message(self, message: str) -> None:
        flash = self._session.get(_MANAGE_FLASH_KEY) or {}
        self._session[_MANAGE_FLASH_KEY] = {**flash, "success_message": message}

    def set_error_message(self, message: str) -> None:
        flash = self._session.get(_MANAGE_FLASH_KEY) or {}
        self._session[_MANAGE_FLASH_KEY] = {**flash, "error_message": message}

    def pop_messages(self) -> ManageFlash:
        """Return the pending banners and clear them."""
        return ManageFlash(**(self._session.pop(_MANAGE_FLASH_KEY, None) or {}))
