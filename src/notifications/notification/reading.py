"""Read-state commands + handlers — mark one or many notifications as read."""

from datetime import UTC, datetime

import structlog
from notifications.channel.in_app import emit_state_change
from notifications.domain import notifications
from notifications.notification.notification import Notification, NotificationStatus
from notifications.notification.queries import iter_all, load_owned
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, List, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

logger = structlog.get_logger(__name__)


@notifications.command(part_of="Notification")
class MarkNotificationRead:
    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)


@notifications.command(part_of="Notification")
class MarkNotificationsRead:
    """Mark the given notifications read, or every unread one when none are given."""

    recipient_id: Identifier(required=True)
    notification_ids: List(content_type=String)


@notifications.command_handler(part_of=Notification)
class ReadNotificationsHandler:
    @handle(MarkNotificationRead)
    def mark_read(self, command: MarkNotificationRead):
        repo = current_domain.repository_for(Notification)
        notification = load_owned(command.notification_id, command.recipient_id)

        if notification.mark_as_read():
            repo.add(notification)
            emit_state_change(
                command.recipient_id,
                "notification_read",
                {
                    "notificationId": str(notification.id),
                    "isRead": True,
                    "readAt": notification.read_at.isoformat(),
                },
            )
        return notification

    @handle(MarkNotificationsRead)
    def mark_many_read(self, command: MarkNotificationsRead):
        repo = current_domain.repository_for(Notification)
        recipient_id = str(command.recipient_id)

        if command.notification_ids:
            candidates = []
            for notification_id in command.notification_ids:
                try:
                    candidates.append(load_owned(notification_id, recipient_id))
                except ObjectNotFoundError:
                    logger.info("Skipping unknown notification in batch read", notification_id=notification_id)
        else:
            candidates = [
                n
                for n in iter_all(recipient_id=recipient_id, is_read=False)
                if n.status != NotificationStatus.DELETED.value
            ]

        modified = []
        for notification in candidates:
            try:
                changed = notification.mark_as_read()
            except ValidationError:
                continue
            if changed:
                repo.add(notification)
                modified.append(str(notification.id))

        if modified:
            emit_state_change(
                recipient_id,
                "notification_read_batch",
                {
                    "notificationIds": modified,
                    "isRead": True,
                    "readAt": datetime.now(UTC).isoformat(),
                },
            )

        logger.info("Notifications marked read", recipient_id=recipient_id, modified=len(modified))
        return len(modified)
