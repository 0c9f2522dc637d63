"""Application tests for the Booking cross-domain event handler."""

from datetime import UTC, datetime, timedelta

from notifications.notification.booking_events import BookingEventsHandler
from notifications.notification.notification import Notification
from protean import current_domain
from shared.events.bookings import BookingStatusChanged

COACH_ID = "65f1a0c2b3d4e5f60718293a"
CLIENT_ID = "65f1a0c2b3d4e5f60718293b"
BOOKING_ID = "65f1a0c2b3d4e5f60718293c"


def _event(old_status, new_status, **overrides):
    start = datetime(2026, 11, 3, 9, 0, tzinfo=UTC)
    defaults = {
        "booking_id": BOOKING_ID,
        "coach_id": COACH_ID,
        "user_id": CLIENT_ID,
        "old_status": old_status,
        "new_status": new_status,
        "start": start,
        "end": start + timedelta(minutes=60),
        "session_type": "Career Coaching",
        "booking_type": "one_on_one",
        "changed_at": datetime.now(UTC),
    }
    defaults.update(overrides)
    return BookingStatusChanged(**defaults)


def _stored(**filters):
    return current_domain.repository_for(Notification)._dao.query.filter(**filters).all().items


class TestBookingStatusChanged:
    def test_confirmation_notifies_client_and_coach(self, booking):
        BookingEventsHandler().on_booking_status_changed(_event("requested", "confirmed", actor_id=COACH_ID))

        client_copies = _stored(recipient_id=CLIENT_ID, notification_type="booking_confirmed")
        coach_copies = _stored(recipient_id=COACH_ID, notification_type="booking_confirmed")
        assert len(client_copies) == 1
        assert len(coach_copies) == 1
        assert client_copies[0].priority == "medium"
        assert coach_copies[0].priority == "low"

    def test_actor_becomes_sender(self, booking):
        BookingEventsHandler().on_booking_status_changed(_event("requested", "confirmed", actor_id=COACH_ID))

        (client_copy,) = _stored(recipient_id=CLIENT_ID)
        assert str(client_copy.sender_id) == COACH_ID

    def test_new_request_goes_to_coach(self, booking, email_queue):
        BookingEventsHandler().on_booking_status_changed(_event(None, "requested", actor_id=CLIENT_ID))

        (request,) = _stored(notification_type="booking_request")
        assert str(request.recipient_id) == COACH_ID
        assert request.get_data()["responseTimeout"] == 24 * 60 * 60 * 1000
        assert [job["recipientEmail"] for job in email_queue.jobs] == ["anna@example.com"]

    def test_cancellation_by_coach_carries_reason(self, booking):
        BookingEventsHandler().on_booking_status_changed(
            _event("confirmed", "cancelled_by_coach", actor_id=COACH_ID, reason="Illness")
        )

        (cancelled,) = _stored(notification_type="booking_cancelled")
        assert str(cancelled.recipient_id) == CLIENT_ID
        data = cancelled.get_data()
        assert data["reason"] == "Illness"
        assert data["cancelledBy"] == "coach"
        assert data["requiresRefund"] is True

    def test_same_status_sends_nothing(self, booking):
        BookingEventsHandler().on_booking_status_changed(_event("confirmed", "confirmed"))
        assert _stored() == []

    def test_unmapped_status_sends_nothing(self, booking):
        BookingEventsHandler().on_booking_status_changed(_event("confirmed", "no_show"))
        assert _stored() == []

    def test_unknown_booking_is_skipped_without_rendering(self, directory, coach, client):
        BookingEventsHandler().on_booking_status_changed(_event("requested", "confirmed"))

        assert _stored() == []
        assert list(directory.lookups) == [("booking", BOOKING_ID)]

    def test_one_failure_does_not_block_the_other_recipient(self, booking, directory):
        # Without the client's name the coach copy cannot be rendered
        directory.users.pop(CLIENT_ID)

        BookingEventsHandler().on_booking_status_changed(_event("requested", "confirmed"))

        assert len(_stored(recipient_id=CLIENT_ID)) == 1
        assert _stored(recipient_id=COACH_ID) == []
