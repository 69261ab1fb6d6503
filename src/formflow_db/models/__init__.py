"""ORM models for formflow_db."""

from formflow_db.models.base import Base
from formflow_db.models.case import Case
from formflow_db.models.journey_session import JourneySession
from formflow_db.models.submission import FeedbackSubmission

# Submission tables a journey's ``persistence.table`` may name
SUBMISSION_MODELS = {
    FeedbackSubmission.__tablename__: FeedbackSubmission,
    Case.__tablename__: Case,
}

__all__ = ["Base", "Case", "FeedbackSubmission", "JourneySession", "SUBMISSION_MODELS"]
