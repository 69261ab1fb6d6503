"""formflow_journeys: declarative form journeys with session-backed answers.

Journeys are defined in YAML (``definitions/``) and loaded by
:class:`JourneyStore`.  The SDK computes navigation and completion over a
user's answers, validates one question at a time, commits completed
answers as a submission, and supports single-field edits of persisted
submissions.
"""

from formflow_journeys.answer_store import AnswerStore, FlashChannel
from formflow_journeys.journey import Journey
from formflow_journeys.mapping import SubmissionMapper
from formflow_journeys.service import SubmissionService
from formflow_journeys.store import JourneyStore

__all__ = [
    "AnswerStore",
    "FlashChannel",
    "Journey",
    "JourneyStore",
    "SubmissionMapper",
    "SubmissionService",
]
