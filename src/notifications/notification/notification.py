"""Notification aggregate — the persisted unit of delivery and of user-facing state.

Notifications are created only by the dispatcher. Afterwards the recipient
moves them through a small lifecycle, and the retention sweep finalizes
expired trash. Read state is tracked separately from the lifecycle status.

State Machine (5 states):
    ACTIVE ⇄ ARCHIVED
    ACTIVE/ARCHIVED → ACTIONED (idempotent)
    ACTIVE/ARCHIVED/ACTIONED → TRASH → (restore) → ACTIVE
    TRASH → DELETED (terminal)
"""

import json
from datetime import UTC, datetime, timedelta
from enum import Enum

from notifications.domain import notifications
from notifications.notification.events import (
    NotificationActioned,
    NotificationArchived,
    NotificationCreated,
    NotificationDeleted,
    NotificationDeliveryFailed,
    NotificationDeliveryRecorded,
    NotificationRead,
    NotificationRestored,
    NotificationTrashed,
    NotificationUnarchived,
)
from notifications.notification.types import lookup
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

TRASH_RETENTION = timedelta(days=30)
DEFAULT_MAX_ATTEMPTS = 3

# Context reference fields a notification may carry, keyed by metadata name
REFERENCE_FIELDS = {
    "bookingId": "booking_id",
    "liveSessionId": "live_session_id",
    "sessionId": "session_id",
    "programId": "program_id",
    "lessonId": "lesson_id",
    "reviewId": "review_id",
    "paymentId": "payment_id",
}


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class NotificationStatus(Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"
    TRASH = "trash"
    DELETED = "deleted"
    ACTIONED = "actioned"


class DeliveryStatus(Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"
    DELIVERED = "delivered"
    READ = "read"


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
_VALID_TRANSITIONS = {
    NotificationStatus.ACTIVE: {
        NotificationStatus.ARCHIVED,
        NotificationStatus.TRASH,
        NotificationStatus.ACTIONED,
    },
    NotificationStatus.ARCHIVED: {
        NotificationStatus.ACTIVE,
        NotificationStatus.TRASH,
        NotificationStatus.ACTIONED,
    },
    NotificationStatus.ACTIONED: {
        NotificationStatus.ARCHIVED,
        NotificationStatus.TRASH,
    },
    NotificationStatus.TRASH: {
        NotificationStatus.ACTIVE,  # Via restore
        NotificationStatus.DELETED,
    },
    NotificationStatus.DELETED: set(),  # Terminal
}


def _load_json(value, default):
    return json.loads(value) if value else default


def _dump_json(value):
    return json.dumps(value, default=str)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@notifications.aggregate
class Notification:
    """A notification addressed to one recipient, possibly on several channels."""

    # Parties
    recipient_id: Identifier(required=True)
    sender_id: Identifier()

    # Classification
    notification_type: String(required=True, max_length=100)
    sub_type: String(max_length=100)
    category: String(required=True, max_length=50)
    priority: String(required=True, max_length=20)

    # Content (literal text or localization keys)
    title: String(required=True, max_length=500)
    message: Text(required=True)
    data: Text()  # JSON: amounts, names, dates and valid actions

    # Context references
    booking_id: String(max_length=50)
    live_session_id: String(max_length=50)
    session_id: String(max_length=50)
    program_id: String(max_length=50)
    lesson_id: String(max_length=50)
    review_id: String(max_length=50)
    payment_id: String(max_length=50)
    additional_data: Text()  # JSON

    # Affordances and channels
    actions: Text()  # JSON list of {type, label, endpoint, data}
    channels: Text()  # JSON list of NotificationChannel values

    # Delivery tracking
    delivery_attempts: Integer(default=0)
    max_attempts: Integer(default=DEFAULT_MAX_ATTEMPTS)
    last_attempt_at: DateTime()
    delivery_statuses: Text()  # JSON list of {channel, status, timestamp, error}

    # Lifecycle
    status: String(choices=NotificationStatus, default=NotificationStatus.ACTIVE.value)
    trashed_at: DateTime()
    restored_at: DateTime()
    deleted_at: DateTime()
    expires_at: DateTime()
    actioned_at: DateTime()

    # Read state
    is_read: Boolean(default=False)
    read_at: DateTime()

    # Grouping
    group_id: String(max_length=50)
    group_order: Integer()

    # Timestamps
    created_at: DateTime()
    updated_at: DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        recipient_id,
        notification_type,
        title,
        message,
        sender_id=None,
        sub_type=None,
        category=None,
        priority=None,
        data=None,
        references=None,
        additional_data=None,
        actions=None,
        channels=None,
        group_id=None,
        group_order=None,
        max_attempts=DEFAULT_MAX_ATTEMPTS,
    ):
        """Create an ACTIVE, unread notification with no delivery attempts.

        Category, priority and channels fall back to the type registry.
        ``references`` maps metadata names (``bookingId``...) to ids.
        """
        spec = lookup(notification_type)
        now = datetime.now(UTC)

        reference_values = {}
        for key, field_name in REFERENCE_FIELDS.items():
            value = (references or {}).get(key)
            if value is not None:
                reference_values[field_name] = str(value)

        notification = cls(
            recipient_id=recipient_id,
            sender_id=sender_id,
            notification_type=notification_type,
            sub_type=sub_type,
            category=category or spec.category,
            priority=priority or spec.priority,
            title=title,
            message=message,
            data=_dump_json(data or {}),
            additional_data=_dump_json(additional_data or {}),
            actions=_dump_json(actions or []),
            channels=_dump_json(list(channels or spec.default_channels)),
            delivery_attempts=0,
            max_attempts=max_attempts,
            delivery_statuses=_dump_json([]),
            status=NotificationStatus.ACTIVE.value,
            is_read=False,
            group_id=group_id,
            group_order=group_order,
            created_at=now,
            updated_at=now,
            **reference_values,
        )

        notification.raise_(
            NotificationCreated(
                notification_id=str(notification.id),
                recipient_id=str(recipient_id),
                sender_id=str(sender_id) if sender_id else None,
                notification_type=notification_type,
                category=notification.category,
                priority=notification.priority,
                booking_id=notification.booking_id,
                created_at=now,
            )
        )

        return notification

    # -------------------------------------------------------------------
    # JSON accessors
    # -------------------------------------------------------------------
    def get_data(self) -> dict:
        return _load_json(self.data, {})

    def get_additional_data(self) -> dict:
        return _load_json(self.additional_data, {})

    def get_actions(self) -> list:
        return _load_json(self.actions, [])

    def get_channels(self) -> list:
        return _load_json(self.channels, [])

    def get_delivery_statuses(self) -> list:
        return _load_json(self.delivery_statuses, [])

    def references(self) -> dict:
        """Non-empty context references, keyed by metadata name."""
        return {key: getattr(self, field) for key, field in REFERENCE_FIELDS.items() if getattr(self, field)}

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate state machine transition."""
        current = NotificationStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def archive(self):
        self._assert_can_transition(NotificationStatus.ARCHIVED)

        now = datetime.now(UTC)
        self.status = NotificationStatus.ARCHIVED.value
        self.updated_at = now

        self.raise_(
            NotificationArchived(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                archived_at=now,
            )
        )

    def unarchive(self):
        if NotificationStatus(self.status) != NotificationStatus.ARCHIVED:
            raise ValidationError({"status": ["Only archived notifications can be unarchived"]})

        now = datetime.now(UTC)
        self.status = NotificationStatus.ACTIVE.value
        self.updated_at = now

        self.raise_(
            NotificationUnarchived(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                unarchived_at=now,
            )
        )

    def move_to_trash(self, trashed_at=None):
        """Move to trash. The notification expires ``TRASH_RETENTION`` later."""
        self._assert_can_transition(NotificationStatus.TRASH)

        previous = self.status
        now = trashed_at or datetime.now(UTC)
        self.status = NotificationStatus.TRASH.value
        self.trashed_at = now
        self.expires_at = now + TRASH_RETENTION
        self.updated_at = now

        self.raise_(
            NotificationTrashed(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                previous_status=previous,
                trashed_at=now,
                expires_at=self.expires_at,
            )
        )

    def restore(self):
        """Bring a trashed notification back to the active list."""
        if NotificationStatus(self.status) != NotificationStatus.TRASH:
            raise ValidationError({"status": ["Only trashed notifications can be restored"]})

        now = datetime.now(UTC)
        self.status = NotificationStatus.ACTIVE.value
        self.trashed_at = None
        self.expires_at = None
        self.restored_at = now
        self.updated_at = now

        self.raise_(
            NotificationRestored(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                restored_at=now,
            )
        )

    def soft_delete(self, deleted_at=None):
        """Finalize a trashed notification. The row is kept for audit."""
        self._assert_can_transition(NotificationStatus.DELETED)

        now = deleted_at or datetime.now(UTC)
        self.status = NotificationStatus.DELETED.value
        self.deleted_at = now
        self.updated_at = now

        self.raise_(
            NotificationDeleted(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                deleted_at=now,
            )
        )

    def mark_as_actioned(self):
        """Record that the requested action was completed.

        Returns False, without touching the notification, when it was
        already actioned.
        """
        if NotificationStatus(self.status) == NotificationStatus.ACTIONED:
            return False

        self._assert_can_transition(NotificationStatus.ACTIONED)

        previous = self.status
        now = datetime.now(UTC)
        self.status = NotificationStatus.ACTIONED.value
        self.actioned_at = now
        self.updated_at = now

        self.raise_(
            NotificationActioned(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                previous_status=previous,
                actioned_at=now,
            )
        )
        return True

    def change_status(self, target):
        """Move to ``target`` (a NotificationStatus value) by the matching transition.

        Returns False when the notification is already in ``target``.
        """
        try:
            target_status = NotificationStatus(target)
        except ValueError:
            raise ValidationError({"status": [f"Unknown status: {target}"]}) from None

        current = NotificationStatus(self.status)
        if target_status == current:
            return False

        if target_status == NotificationStatus.TRASH:
            self.move_to_trash()
        elif target_status == NotificationStatus.ARCHIVED:
            self.archive()
        elif target_status == NotificationStatus.ACTIVE:
            if current == NotificationStatus.TRASH:
                self.restore()
            else:
                self.unarchive()
        elif target_status == NotificationStatus.ACTIONED:
            self.mark_as_actioned()
        else:
            self.soft_delete()
        return True

    # -------------------------------------------------------------------
    # Read state
    # -------------------------------------------------------------------
    def mark_as_read(self):
        """Mark as read. Returns False when it was already read."""
        if NotificationStatus(self.status) == NotificationStatus.DELETED:
            raise ValidationError({"is_read": ["Deleted notifications cannot be marked as read"]})
        if self.is_read:
            return False

        now = datetime.now(UTC)
        self.is_read = True
        self.read_at = now
        self.updated_at = now

        self.raise_(
            NotificationRead(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                read_at=now,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Delivery tracking
    # -------------------------------------------------------------------
    def record_delivery(self, channel, status, error=None):
        """Append a per-channel delivery outcome.

        Only SENT and FAILED outcomes count as delivery attempts.
        """
        delivery_status = DeliveryStatus(status)
        now = datetime.now(UTC)

        statuses = self.get_delivery_statuses()
        statuses.append(
            {
                "channel": channel,
                "status": delivery_status.value,
                "timestamp": now.isoformat(),
                "error": error,
            }
        )
        self.delivery_statuses = _dump_json(statuses)

        if delivery_status in (DeliveryStatus.SENT, DeliveryStatus.FAILED):
            self.delivery_attempts = (self.delivery_attempts or 0) + 1
            self.last_attempt_at = now

        self.raise_(
            NotificationDeliveryRecorded(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                channel=channel,
                status=delivery_status.value,
                attempt=self.delivery_attempts,
                recorded_at=now,
            )
        )

        if delivery_status == DeliveryStatus.FAILED:
            self.raise_(
                NotificationDeliveryFailed(
                    notification_id=str(self.id),
                    recipient_id=str(self.recipient_id),
                    notification_type=self.notification_type,
                    channel=channel,
                    error=(error or "Unknown delivery error")[:1000],
                    attempt=self.delivery_attempts,
                    failed_at=now,
                )
            )
