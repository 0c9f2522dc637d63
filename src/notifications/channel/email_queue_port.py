"""Email queue port — abstract interface for handing send jobs to the mail worker."""

from abc import ABC, abstractmethod


class EmailJobEnqueuer(ABC):
    """Abstract interface for email job queues.

    A job is ``{notificationType, recipientEmail, language, templateData,
    mailjetTemplateId}``. The worker owns delivery and retries.
    """

    @abstractmethod
    def enqueue(self, name: str, job: dict) -> dict:
        """Enqueue a send job.

        Returns:
            dict with keys: job_id, status ("queued" or "failed"), error (optional)
        """
        ...
