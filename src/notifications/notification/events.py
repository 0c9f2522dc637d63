"""Domain events for the Notification aggregate."""

from notifications.domain import notifications
from protean.fields import DateTime, Identifier, Integer, String


@notifications.event(part_of="Notification")
class NotificationCreated:
    """A notification was persisted and is about to be fanned out."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    sender_id: Identifier()
    notification_type: String(required=True)
    category: String(required=True)
    priority: String(required=True)
    booking_id: String()
    created_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationRead:
    """The recipient opened the notification."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    read_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationArchived:
    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    archived_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationUnarchived:
    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    unarchived_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationTrashed:
    """The notification was moved to trash and will expire."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    previous_status: String(required=True)
    trashed_at: DateTime(required=True)
    expires_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationRestored:
    """A trashed notification was brought back to the active list."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    restored_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationDeleted:
    """A trashed notification reached its terminal state."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    deleted_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationActioned:
    """The recipient completed the action the notification asked for."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    previous_status: String(required=True)
    actioned_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationDeliveryRecorded:
    """A channel reported an outcome for this notification."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    channel: String(required=True)
    status: String(required=True)
    attempt: Integer(required=True)
    recorded_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationDeliveryFailed:
    """A channel failed to deliver this notification."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    notification_type: String(required=True)
    channel: String(required=True)
    error: String(required=True, max_length=1000)
    attempt: Integer(required=True)
    failed_at: DateTime(required=True)
