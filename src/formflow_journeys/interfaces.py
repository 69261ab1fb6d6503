"""Abstract interfaces for post-submission side effects.

The SDK ships one concrete implementation, :class:`LoggingNotifier`.  Real
deployments plug in their own (email, queue message, webhook)::

    service = SubmissionService(definition, notifier=MyEmailNotifier(...))
    submission = await service.save_submission(db, answers)
    await service.send_notification(submission)
"""

import logging
from abc import ABC, abstractmethod

from formflow_journeys.models.session import Submission

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Interface for announcing a committed submission.

    Called once, after the record is persisted.  A failure here never
    causes the submission to be persisted again.
    """

    @abstractmethod
    async def notify(self, submission: Submission) -> None:
        """Deliver a notification for ``submission``.

        Parameters
        ----------
        submission:
            The committed submission, including its reference and the
            answers snapshot it was created from.
        """
        ...


class LoggingNotifier(Notifier):
    """Logs the reference and the answered fields."""

    async def notify(self, submission: Submission) -> None:
        logger.info(
            "Submission %s received (%s)",
            submission.reference,
            ", ".join(sorted(submission.answers)),
        )
