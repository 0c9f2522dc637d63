"""In-app channel — pushes a freshly stored notification to the recipient's tray.

Two realtime events go to the recipient: ``notification`` with the serialized
notification, then ``invalidate_notifications`` so open clients refetch.
"""

from datetime import UTC, datetime

import structlog
from notifications.channel import get_realtime_notifier
from notifications.errors import ChannelDeliveryError
from notifications.notification.notification import DeliveryStatus
from notifications.notification.types import NotificationChannel

logger = structlog.get_logger(__name__)

NOTIFICATION_EVENT = "notification"
INVALIDATE_EVENT = "invalidate_notifications"


def _iso(value):
    return value.isoformat() if value is not None else None


def serialize_notification(notification, context=None, sender=None) -> dict:
    """Tray representation of a notification, with ids stringified."""
    return {
        "id": str(notification.id),
        "recipient": str(notification.recipient_id),
        "sender": sender.summary() if sender is not None else (
            {"id": str(notification.sender_id)} if notification.sender_id else None
        ),
        "type": notification.notification_type,
        "subType": notification.sub_type,
        "category": notification.category,
        "priority": notification.priority,
        "title": notification.title,
        "message": notification.message,
        "data": notification.get_data(),
        "actions": notification.get_actions(),
        "metadata": {
            **notification.references(),
            "additionalData": notification.get_additional_data(),
        },
        "context": context.summary() if context is not None else None,
        "channels": notification.get_channels(),
        "status": notification.status,
        "isRead": bool(notification.is_read),
        "readAt": _iso(notification.read_at),
        "groupId": notification.group_id,
        "groupOrder": notification.group_order,
        "createdAt": _iso(notification.created_at),
        "timestamp": datetime.now(UTC).isoformat(),
    }


class InAppChannel:
    """Delivers a notification over the realtime transport."""

    channel = NotificationChannel.IN_APP.value

    def __init__(self, realtime):
        self.realtime = realtime

    def deliver(self, notification, context=None, sender=None) -> str:
        """Emit the notification and the invalidation trigger.

        Returns the delivery status to record: ``sent``, or ``pending``
        when the recipient is not connected.
        """
        recipient = str(notification.recipient_id)
        payload = serialize_notification(notification, context=context, sender=sender)

        result = self.realtime.emit(recipient, NOTIFICATION_EVENT, payload)
        if result.get("status") == "failed":
            raise ChannelDeliveryError(self.channel, result.get("error") or "Realtime emit failed")

        if result.get("status") == "offline":
            logger.info(
                "Recipient offline, in-app notification kept for next fetch",
                notification_id=str(notification.id),
                recipient_id=recipient,
            )
            return DeliveryStatus.PENDING.value

        result = self.realtime.emit(recipient, INVALIDATE_EVENT)
        if result.get("status") == "failed":
            raise ChannelDeliveryError(self.channel, result.get("error") or "Realtime invalidation failed")

        logger.info(
            "In-app notification emitted",
            notification_id=str(notification.id),
            recipient_id=recipient,
        )
        return DeliveryStatus.SENT.value


def emit_state_change(user_id, event, payload) -> None:
    """Tell the recipient's open clients about a read or status change.

    A failed emit is logged; the change itself is already stored.
    """
    result = get_realtime_notifier().emit(str(user_id), event, payload)
    if result.get("status") == "failed":
        logger.warning("Realtime state event not delivered", user_id=str(user_id), event=event, error=result.get("error"))
