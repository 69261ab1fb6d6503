"""SDK exceptions.

``QuestionNotFoundError`` and ``RecordNotFoundError`` subclass ``ValueError``
with a "not found" message so the server's global ``ValueError`` handler maps
them to 404 if a controller ever lets one escape.

``PersistenceError`` separates technical detail (logged where it is raised)
from the user-facing message it carries.  Controllers put ``user_message``
in the flash channel; ``str(exc)`` is never shown to the user.
"""

from __future__ import annotations

import logging


class QuestionNotFoundError(ValueError):
    """Unknown section or question URL segment."""

    def __init__(self, section: str, question: str) -> None:
        super().__init__(f"Question not found: section={section}, question={question}")
        self.section = section
        self.question = question


class RecordNotFoundError(ValueError):
    """Unknown or soft-deleted submission id."""

    def __init__(self, record_id: str) -> None:
        super().__init__(f"Submission not found: id={record_id}")
        self.record_id = record_id


class PersistenceError(Exception):
    """A database write or read failed.

    Attributes:
        user_message: safe text for the flash channel
    """

    def __init__(self, user_message: str, technical_message: str = "") -> None:
        super().__init__(technical_message or user_message)
        self.user_message = user_message


def persistence_error(
    logger: logging.Logger,
    technical_message: str,
    user_message: str,
    cause: BaseException | None = None,
) -> PersistenceError:
    """Log technical detail and return a ``PersistenceError`` for the caller to raise."""
    logger.error("%s: %s", technical_message, cause)
    return PersistenceError(user_message, technical_message)
