"""Integration tests for notification projections — verify projectors maintain read models.

In synchronous test mode, projectors run on events raised during aggregate save.
"""

from datetime import UTC, datetime

import pytest
from notifications.notification.dispatcher import send_notification
from notifications.notification.notification import Notification
from notifications.projections.delivery_failures import DeliveryFailures
from notifications.projections.notification_stats import NotificationStats
from protean import current_domain
from protean.exceptions import ObjectNotFoundError

CLIENT_ID = "65f1a0c2b3d4e5f60718293b"
BOOKING_ID = "65f1a0c2b3d4e5f60718293c"


def _create_notification(notification_type="booking_reminder", **overrides):
    n = Notification.create(
        recipient_id=CLIENT_ID,
        notification_type=notification_type,
        title=f"notifications:{notification_type}.title",
        message=f"notifications:{notification_type}.message",
        **overrides,
    )
    current_domain.repository_for(Notification).add(n)
    return n


def _today_key(notification_type):
    return f"{datetime.now(UTC).strftime('%Y-%m-%d')}:{notification_type}"


class TestNotificationStats:
    def test_first_notification_creates_row(self):
        _create_notification()

        stat = current_domain.repository_for(NotificationStats).get(_today_key("booking_reminder"))
        assert stat.count == 1
        assert stat.category == "booking"

    def test_counts_accumulate_per_type(self):
        for _ in range(3):
            _create_notification()
        _create_notification("payment_received")

        repo = current_domain.repository_for(NotificationStats)
        assert repo.get(_today_key("booking_reminder")).count == 3
        assert repo.get(_today_key("payment_received")).count == 1

    def test_updates_do_not_count(self):
        n = _create_notification()
        n.mark_as_read()
        current_domain.repository_for(Notification).add(n)

        assert current_domain.repository_for(NotificationStats).get(_today_key("booking_reminder")).count == 1

    def test_no_row_for_unsent_type(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(NotificationStats).get(_today_key("payout_initiated"))


class TestDeliveryFailures:
    def test_failed_channel_is_logged(self, booking, email_queue):
        email_queue.configure(should_succeed=False, failure_reason="queue down")

        n = send_notification(
            {"type": "booking_reminder", "recipient": CLIENT_ID, "metadata": {"bookingId": BOOKING_ID}}
        )

        failures = current_domain.repository_for(DeliveryFailures)._dao.query.filter(
            notification_id=str(n.id)
        ).all().items
        assert len(failures) == 1
        failure = failures[0]
        assert failure.channel == "email"
        assert failure.error == "queue down"
        assert failure.notification_type == "booking_reminder"
        assert str(failure.recipient_id) == CLIENT_ID

    def test_successful_delivery_logs_nothing(self, booking):
        send_notification({"type": "booking_reminder", "recipient": CLIENT_ID, "metadata": {"bookingId": BOOKING_ID}})

        assert current_domain.repository_for(DeliveryFailures)._dao.query.all().total == 0

    def test_each_attempt_gets_its_own_row(self):
        n = _create_notification()
        n.record_delivery("in_app", "failed", error="socket closed")
        n.record_delivery("in_app", "failed", error="socket closed")
        current_domain.repository_for(Notification).add(n)

        rows = current_domain.repository_for(DeliveryFailures)._dao.query.filter(notification_id=str(n.id)).all()
        assert sorted(row.attempt for row in rows.items) == [1, 2]
