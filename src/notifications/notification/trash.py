"""EmptyTrash command + handler — delete everything in a recipient's trash now."""

from datetime import UTC, datetime

import structlog
from notifications.channel.in_app import emit_state_change
from notifications.domain import notifications
from notifications.notification.notification import Notification, NotificationStatus
from notifications.notification.queries import iter_all
from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

logger = structlog.get_logger(__name__)


@notifications.command(part_of="Notification")
class EmptyTrash:
    recipient_id: Identifier(required=True)


@notifications.command_handler(part_of=Notification)
class EmptyTrashHandler:
    @handle(EmptyTrash)
    def empty_trash(self, command: EmptyTrash):
        repo = current_domain.repository_for(Notification)
        now = datetime.now(UTC)

        deleted = []
        for notification in iter_all(recipient_id=str(command.recipient_id), status=NotificationStatus.TRASH.value):
            notification.soft_delete(deleted_at=now)
            repo.add(notification)
            deleted.append(str(notification.id))

        if deleted:
            emit_state_change(
                command.recipient_id,
                "notification_status_updated",
                {
                    "notificationIds": deleted,
                    "status": NotificationStatus.DELETED.value,
                    "timestamp": now.isoformat(),
                },
            )

        logger.info("Trash emptied", recipient_id=str(command.recipient_id), deleted=len(deleted))
        return len(deleted)
