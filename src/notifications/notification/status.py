"""Status commands + handlers — archive, trash, restore and action notifications."""

from datetime import UTC, datetime

import structlog
from notifications.channel.in_app import emit_state_change
from notifications.domain import notifications
from notifications.notification.notification import Notification, NotificationStatus
from notifications.notification.queries import load_owned
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, List, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

logger = structlog.get_logger(__name__)

# Statuses a recipient may ask for; deletion happens through the trash
USER_SETTABLE_STATUSES = frozenset(
    {
        NotificationStatus.ACTIVE.value,
        NotificationStatus.ARCHIVED.value,
        NotificationStatus.TRASH.value,
    }
)


def _validate_target(status):
    if status not in USER_SETTABLE_STATUSES:
        raise ValidationError({"status": [f"Status must be one of {sorted(USER_SETTABLE_STATUSES)}"]})


def _status_payload(notification) -> dict:
    return {
        "notificationId": str(notification.id),
        "status": notification.status,
        "timestamp": datetime.now(UTC).isoformat(),
    }


@notifications.command(part_of="Notification")
class ChangeNotificationStatus:
    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    status: String(required=True, max_length=20)


@notifications.command(part_of="Notification")
class ChangeNotificationsStatus:
    """Move several notifications at once. Items that cannot move are skipped."""

    recipient_id: Identifier(required=True)
    notification_ids: List(content_type=String, required=True)
    status: String(required=True, max_length=20)


@notifications.command(part_of="Notification")
class MarkNotificationActioned:
    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)


@notifications.command_handler(part_of=Notification)
class NotificationStatusHandler:
    @handle(ChangeNotificationStatus)
    def change_status(self, command: ChangeNotificationStatus):
        _validate_target(command.status)
        repo = current_domain.repository_for(Notification)
        notification = load_owned(command.notification_id, command.recipient_id)

        if notification.change_status(command.status):
            repo.add(notification)
            emit_state_change(command.recipient_id, "notification_status_changed", _status_payload(notification))
        return notification

    @handle(ChangeNotificationsStatus)
    def change_many(self, command: ChangeNotificationsStatus):
        _validate_target(command.status)
        repo = current_domain.repository_for(Notification)

        modified = []
        for notification_id in command.notification_ids:
            try:
                notification = load_owned(notification_id, command.recipient_id)
                changed = notification.change_status(command.status)
            except (ObjectNotFoundError, ValidationError) as exc:
                logger.info("Skipping notification in batch status change", notification_id=notification_id, reason=str(exc))
                continue
            if changed:
                repo.add(notification)
                modified.append(str(notification.id))

        if modified:
            emit_state_change(
                command.recipient_id,
                "notification_status_updated",
                {
                    "notificationIds": modified,
                    "status": command.status,
                    "timestamp": datetime.now(UTC).isoformat(),
                },
            )
        return len(modified)

    @handle(MarkNotificationActioned)
    def mark_actioned(self, command: MarkNotificationActioned):
        repo = current_domain.repository_for(Notification)
        notification = load_owned(command.notification_id, command.recipient_id)

        if notification.mark_as_actioned():
            repo.add(notification)
            emit_state_change(command.recipient_id, "notification_status_changed", _status_payload(notification))
        return notification
