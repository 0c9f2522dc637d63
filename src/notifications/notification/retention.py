"""PurgeExpiredTrash command + handler — finalize trash past its retention.

Invoked by a background job or cron. Every trashed notification whose
``expires_at`` is at or before ``as_of`` becomes DELETED.
"""

from datetime import UTC, datetime

import structlog
from notifications.domain import notifications
from notifications.notification.notification import Notification, NotificationStatus
from notifications.notification.queries import iter_all
from protean.fields import DateTime
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

logger = structlog.get_logger(__name__)


@notifications.command(part_of="Notification")
class PurgeExpiredTrash:
    """Request to delete all expired trash."""

    as_of: DateTime()  # Optional: purge as of this time (defaults to now)


def _aligned(value, reference):
    """Make ``value`` comparable with ``reference`` when only one is tz-aware."""
    if value.tzinfo is not None and reference.tzinfo is None:
        return value.replace(tzinfo=None)
    if value.tzinfo is None and reference.tzinfo is not None:
        return value.replace(tzinfo=reference.tzinfo)
    return value


@notifications.command_handler(part_of=Notification)
class PurgeExpiredTrashHandler:
    @handle(PurgeExpiredTrash)
    def purge(self, command: PurgeExpiredTrash):
        as_of = command.as_of or datetime.now(UTC)
        repo = current_domain.repository_for(Notification)

        purged = 0
        for notification in iter_all(status=NotificationStatus.TRASH.value):
            if notification.expires_at is None or _aligned(notification.expires_at, as_of) > as_of:
                continue

            notification.soft_delete(deleted_at=as_of)
            repo.add(notification)
            purged += 1

        logger.info("Expired trash purged", purged=purged, as_of=str(as_of))
        return purged
