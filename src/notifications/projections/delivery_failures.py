"""DeliveryFailures — log of failed channel deliveries for investigation."""

from notifications.domain import notifications
from notifications.notification.events import NotificationDeliveryFailed
from notifications.notification.notification import Notification
from protean.core.projector import on
from protean.fields import DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain


@notifications.projection
class DeliveryFailures:
    failure_key: String(identifier=True, required=True)  # "notification_id:channel:attempt"
    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    notification_type: String(required=True)
    channel: String(required=True, max_length=20)
    error: String(max_length=1000)
    attempt: Integer(default=1)
    failed_at: DateTime()


@notifications.projector(projector_for=DeliveryFailures, aggregates=[Notification])
class DeliveryFailuresProjector:
    @on(NotificationDeliveryFailed)
    def on_delivery_failed(self, event):
        repo = current_domain.repository_for(DeliveryFailures)
        repo.add(
            DeliveryFailures(
                failure_key=f"{event.notification_id}:{event.channel}:{event.attempt}",
                notification_id=event.notification_id,
                recipient_id=event.recipient_id,
                notification_type=event.notification_type,
                channel=event.channel,
                error=event.error,
                attempt=event.attempt,
                failed_at=event.failed_at,
            )
        )
