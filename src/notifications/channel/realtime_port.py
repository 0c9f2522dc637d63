"""Realtime channel port — abstract interface for pushing events to a connected user."""

from abc import ABC, abstractmethod


class RealtimeNotifier(ABC):
    """Abstract interface for realtime transports (sockets, SSE, ...)."""

    @abstractmethod
    def emit(self, user_id: str, event: str, payload: dict | None = None) -> dict:
        """Emit ``event`` to the private channel of ``user_id``.

        Returns:
            dict with keys: status ("sent", "offline" or "failed"), error (optional)
        """
        ...
