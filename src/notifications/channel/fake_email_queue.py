"""Fake email queue — records enqueued jobs for testing."""

from uuid import uuid4

from notifications.channel.email_queue_port import EmailJobEnqueuer


class FakeEmailQueue(EmailJobEnqueuer):
    """Email queue that keeps jobs in memory for test assertions."""

    def __init__(self):
        self.jobs: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Email queue unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Email queue unavailable"):
        """Configure the fake queue behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def enqueue(self, name: str, job: dict) -> dict:
        if not self.should_succeed:
            return {"job_id": None, "status": "failed", "error": self.failure_reason}

        job_id = f"job-{uuid4().hex[:12]}"
        self.jobs.append({"job_id": job_id, "name": name, **job})
        return {"job_id": job_id, "status": "queued"}

    def reset(self):
        """Clear queued jobs (useful between tests)."""
        self.jobs.clear()
        self.should_succeed = True
        self.failure_reason = "Email queue unavailable"
