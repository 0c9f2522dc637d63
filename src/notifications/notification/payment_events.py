"""Inbound cross-domain event handler — Notifications reacts to Payment events.

Listens for PaymentCompleted: the payer gets a receipt and the coach learns
about the payment. Receipts are deduplicated per booking by the dispatcher.
"""

import structlog
from notifications.domain import notifications
from notifications.errors import NotificationError
from notifications.notification.dispatcher import NotificationDispatcher
from notifications.notification.notification import Notification
from notifications.notification.request import NotificationRequest
from protean.utils.mixins import handle
from shared.events.payments import PaymentCompleted

logger = structlog.get_logger(__name__)

notifications.register_external_event(PaymentCompleted, "Payments.PaymentCompleted.v1")


def _payment_metadata(event: PaymentCompleted) -> dict:
    metadata = {
        "paymentId": str(event.payment_id),
        "amount": event.amount,
        "currency": event.currency,
    }
    if event.booking_id:
        metadata["bookingId"] = str(event.booking_id)
    if event.program_id:
        metadata["programId"] = str(event.program_id)
        metadata["additionalData"] = {"type": "program_purchase"}
    return metadata


@notifications.event_handler(part_of=Notification, stream_category="payments::payment")
class PaymentEventsHandler:
    """Reacts to Payment domain events to send receipts and payment notices."""

    @handle(PaymentCompleted)
    def on_payment_completed(self, event: PaymentCompleted) -> None:
        dispatcher = NotificationDispatcher()
        metadata = _payment_metadata(event)

        requests = [
            NotificationRequest(
                notification_type="payment_received",
                recipient_id=str(event.payer_id),
                recipient_role="client",
                metadata=dict(metadata),
            )
        ]
        if event.recipient_id:
            requests.append(
                NotificationRequest(
                    notification_type="payment_made_by_user",
                    recipient_id=str(event.recipient_id),
                    sender_id=str(event.payer_id),
                    recipient_role="coach",
                    metadata={**metadata, "paymentStatus": "completed"},
                )
            )

        for request in requests:
            try:
                dispatcher.send(request)
            except NotificationError as exc:
                logger.error(
                    "Payment notification failed",
                    payment_id=str(event.payment_id),
                    notification_type=request.notification_type,
                    error=str(exc),
                )
