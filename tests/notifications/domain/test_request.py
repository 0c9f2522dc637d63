"""Tests for NotificationRequest parsing and defaults."""

from notifications.notification.request import NotificationRequest


class TestFromDict:
    def test_camel_case_keys(self):
        request = NotificationRequest.from_dict(
            {
                "type": "booking_confirmed",
                "recipient": "65f1a0c2b3d4e5f60718293b",
                "sender": "65f1a0c2b3d4e5f60718293a",
                "requiresAction": False,
                "actions": ["view"],
                "recipientRole": "client",
                "groupId": "g-1",
                "metadata": {"bookingId": "b-1"},
            }
        )
        assert request.notification_type == "booking_confirmed"
        assert request.recipient_id == "65f1a0c2b3d4e5f60718293b"
        assert request.sender_id == "65f1a0c2b3d4e5f60718293a"
        assert request.actions == ("view",)
        assert request.recipient_role == "client"
        assert request.group_id == "g-1"
        assert request.metadata == {"bookingId": "b-1"}

    def test_snake_case_keys_and_unknown_keys(self):
        request = NotificationRequest.from_dict(
            {"notification_type": "welcome", "recipient_id": "u-1", "whatever": 1}
        )
        assert request.notification_type == "welcome"
        assert request.recipient_id == "u-1"
        assert request.metadata == {}


class TestDefaults:
    def test_registry_defaults(self):
        request = NotificationRequest(notification_type="booking_request")
        assert request.resolved_channels() == ("in_app", "email")
        assert request.valid_actions() == ["accept", "decline", "suggest"]
        assert request.needs_action() is True

    def test_overrides(self):
        request = NotificationRequest(
            notification_type="booking_request",
            channels=("in_app",),
            actions=("approve",),
            requires_action=False,
        )
        assert request.resolved_channels() == ("in_app",)
        assert request.valid_actions() == ["approve"]
        assert request.needs_action() is False

    def test_empty_action_override_means_no_actions(self):
        request = NotificationRequest(notification_type="booking_request", actions=())
        assert request.valid_actions() == []
