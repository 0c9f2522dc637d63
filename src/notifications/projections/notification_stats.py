"""NotificationStats — daily counts of created notifications by type."""

from notifications.domain import notifications
from notifications.notification.events import NotificationCreated
from notifications.notification.notification import Notification
from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Integer, String
from protean.utils.globals import current_domain


@notifications.projection
class NotificationStats:
    stat_key: String(identifier=True, required=True)  # "YYYY-MM-DD:type"
    date: String(required=True, max_length=10)
    notification_type: String(required=True)
    category: String(max_length=50)
    count: Integer(default=0)
    updated_at: DateTime()


@notifications.projector(projector_for=NotificationStats, aggregates=[Notification])
class NotificationStatsProjector:
    @on(NotificationCreated)
    def on_notification_created(self, event):
        repo = current_domain.repository_for(NotificationStats)

        date_str = event.created_at.strftime("%Y-%m-%d")
        stat_key = f"{date_str}:{event.notification_type}"

        try:
            stat = repo.get(stat_key)
            stat.count = stat.count + 1
            stat.updated_at = event.created_at
        except ObjectNotFoundError:
            stat = NotificationStats(
                stat_key=stat_key,
                date=date_str,
                notification_type=event.notification_type,
                category=event.category,
                count=1,
                updated_at=event.created_at,
            )

        repo.add(stat)
