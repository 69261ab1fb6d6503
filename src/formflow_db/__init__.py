"""formflow_db: PostgreSQL persistence layer for form submissions.

This package provides the ORM model, async engine factory, and repository
for creating, updating, soft-deleting, and listing submissions.  It is
consumed by the submission service in ``formflow_journeys`` and by the
FastAPI server.
"""

from formflow_db.models.submission import FeedbackSubmission
from formflow_db.engine import get_engine, get_session_factory
from formflow_db.repository import SubmissionRepository

__all__ = [
    "FeedbackSubmission",
    "get_engine",
    "get_session_factory",
    "SubmissionRepository",
]
