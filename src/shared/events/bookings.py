"""Cross-domain event contracts for Bookings domain events.

These classes define the event shape for consumption by the notifications
domain. They are registered as external events via
domain.register_external_event() with matching __type__ strings so
Protean's stream deserialization works correctly.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Identifier, String


class BookingStatusChanged(BaseEvent):
    """A booking moved from one status to another."""

    __version__ = 1

    booking_id = Identifier(required=True)
    coach_id = Identifier(required=True)
    user_id = Identifier()
    old_status = String(max_length=50)
    new_status = String(required=True, max_length=50)
    start = DateTime()
    end = DateTime()
    session_type = String(max_length=100)
    booking_type = String(max_length=50)
    actor_id = Identifier()  # Who caused the change
    reason = String(max_length=1000)
    changed_at = DateTime(required=True)
