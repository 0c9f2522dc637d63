"""Fake realtime notifier — records emitted events for testing."""

from notifications.channel.realtime_port import RealtimeNotifier


class FakeRealtimeNotifier(RealtimeNotifier):
    """Realtime notifier that records events in memory for test assertions."""

    def __init__(self):
        self.emitted: list[dict] = []
        self.offline_users: set[str] = set()
        self.should_succeed = True
        self.failure_reason = "Realtime transport unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Realtime transport unavailable"):
        """Configure the fake notifier behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def set_offline(self, user_id: str):
        self.offline_users.add(str(user_id))

    def emit(self, user_id: str, event: str, payload: dict | None = None) -> dict:
        if not self.should_succeed:
            return {"status": "failed", "error": self.failure_reason}

        if str(user_id) in self.offline_users:
            return {"status": "offline"}

        self.emitted.append({"user_id": str(user_id), "event": event, "payload": payload})
        return {"status": "sent"}

    def events_for(self, user_id: str, event: str | None = None) -> list[dict]:
        return [e for e in self.emitted if e["user_id"] == str(user_id) and (event is None or e["event"] == event)]

    def reset(self):
        """Clear emitted events (useful between tests)."""
        self.emitted.clear()
        self.offline_users.clear()
        self.should_succeed = True
        self.failure_reason = "Realtime transport unavailable"
