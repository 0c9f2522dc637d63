"""Inbound cross-domain event handler — Notifications reacts to Booking events.

Listens for BookingStatusChanged and sends every notification the status
mapper derives for the transition. Notification failures are logged and
never block the booking flow.
"""

import structlog
from notifications.directory import get_directory
from notifications.domain import notifications
from notifications.errors import NotificationError
from notifications.notification.dispatcher import NotificationDispatcher
from notifications.notification.notification import Notification
from notifications.notification.status_mapper import descriptors_for_transition
from protean.utils.mixins import handle
from shared.events.bookings import BookingStatusChanged

logger = structlog.get_logger(__name__)

notifications.register_external_event(BookingStatusChanged, "Bookings.BookingStatusChanged.v1")


@notifications.event_handler(part_of=Notification, stream_category="bookings::booking")
class BookingEventsHandler:
    """Reacts to Booking domain events to notify coaches and clients."""

    @handle(BookingStatusChanged)
    def on_booking_status_changed(self, event: BookingStatusChanged) -> None:
        booking = get_directory().get_booking(str(event.booking_id))
        if booking is None:
            logger.warning(
                "Booking not found, skipping status notifications",
                booking_id=str(event.booking_id),
                new_status=event.new_status,
            )
            return

        metadata = {"actionResult": event.new_status}
        if event.reason:
            metadata["reason"] = event.reason

        descriptors = descriptors_for_transition(event.old_status, event.new_status, booking, metadata)
        if not descriptors:
            logger.debug(
                "No notifications for booking transition",
                booking_id=str(event.booking_id),
                old_status=event.old_status,
                new_status=event.new_status,
            )
            return

        dispatcher = NotificationDispatcher()
        sender_id = str(event.actor_id) if event.actor_id else None
        for descriptor in descriptors:
            try:
                dispatcher.send(descriptor.to_request(sender_id=sender_id), context=booking)
            except NotificationError as exc:
                logger.error(
                    "Booking notification failed",
                    booking_id=str(event.booking_id),
                    notification_type=descriptor.notification_type,
                    recipient_id=descriptor.recipient_id,
                    error=str(exc),
                )
