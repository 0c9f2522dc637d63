"""Cross-domain event contracts for Payments domain events.

Registered as external events in the notifications domain with matching
__type__ strings.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Float, Identifier, String


class PaymentCompleted(BaseEvent):
    """A client's payment for a session or a program was captured."""

    __version__ = 1

    payment_id = Identifier(required=True)
    payer_id = Identifier(required=True)
    recipient_id = Identifier()  # The coach being paid
    booking_id = Identifier()
    program_id = Identifier()
    amount = Float(required=True)
    currency = String(max_length=3)
    completed_at = DateTime(required=True)
