"""Notification dispatcher — the single entry point for sending a notification.

``send`` runs resolve -> render -> persist -> fan-out for one recipient:

1. Resolve the recipient, falling back to the sender or the context's parties.
2. Drop duplicate payment receipts for the same booking.
3. Resolve the context the notification is about.
4. Render content through the template registry.
5. Persist the notification (ACTIVE, unread, no attempts yet).
6. Deliver on each requested channel, recording one delivery status each.

Resolution, rendering and persistence failures propagate to the caller.
Channel failures are logged and recorded, never raised.
"""

import re
from dataclasses import replace
from datetime import UTC, datetime, timedelta

import structlog
from notifications.channel import get_email_queue, get_realtime_notifier
from notifications.channel.email import EmailChannel
from notifications.channel.in_app import InAppChannel
from notifications.directory import get_directory
from notifications.errors import ChannelDeliveryError, ConfigurationError
from notifications.notification.context import ContextResolver, NotificationContext
from notifications.notification.notification import DeliveryStatus, Notification
from notifications.notification.request import NotificationRequest
from notifications.notification.types import NotificationChannel, is_registered
from notifications.templates import render_content
from protean.utils.globals import current_domain

logger = structlog.get_logger(__name__)

RECIPIENT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")

DEDUP_WINDOW = timedelta(minutes=5)
DEDUPLICATED_TYPES = frozenset({"payment_received"})


def is_valid_recipient(value) -> bool:
    return value is not None and bool(RECIPIENT_ID_PATTERN.match(str(value)))


class NotificationDispatcher:
    """Creates and delivers notifications.

    Adapters default to the configured singletons; tests may inject their own.
    """

    def __init__(self, directory=None, realtime=None, email_queue=None):
        self.directory = directory or get_directory()
        self.realtime = realtime or get_realtime_notifier()
        self.email_queue = email_queue or get_email_queue()
        self.resolver = ContextResolver(self.directory)
        self.in_app = InAppChannel(self.realtime)
        self.email = EmailChannel(self.directory, self.email_queue)

    def send(self, config, context=None):
        """Create and deliver one notification.

        Returns the stored Notification, or None when it was deduplicated.
        """
        request = config if isinstance(config, NotificationRequest) else NotificationRequest.from_dict(config)
        supplied = NotificationContext.of(context)

        request = replace(request, recipient_id=self._resolve_recipient(request, supplied))

        if not is_registered(request.notification_type):
            logger.warning("Unregistered notification type", notification_type=request.notification_type)

        if self._is_duplicate(request):
            logger.info(
                "Duplicate notification suppressed",
                notification_type=request.notification_type,
                booking_id=request.metadata.get("bookingId"),
                recipient_id=request.recipient_id,
            )
            return None

        resolved = self.resolver.resolve(request.notification_type, request.metadata, supplied)
        content = render_content(request, resolved)

        notification = self._create(request, resolved, content)
        repo = current_domain.repository_for(Notification)
        repo.add(notification)

        logger.info(
            "Notification created",
            notification_id=str(notification.id),
            notification_type=notification.notification_type,
            recipient_id=str(notification.recipient_id),
            channels=notification.get_channels(),
        )

        self._fan_out(notification, request, resolved, content)
        repo.add(notification)

        return notification

    # -------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------
    def _resolve_recipient(self, request, context) -> str:
        if is_valid_recipient(request.recipient_id):
            return str(request.recipient_id)

        candidates = (
            ("sender", request.sender_id),
            ("context_user", context.user_id),
            ("context_coach", context.coach_id),
        )
        for source, candidate in candidates:
            if is_valid_recipient(candidate):
                logger.warning(
                    "Invalid recipient, using fallback",
                    notification_type=request.notification_type,
                    given=request.recipient_id,
                    source=source,
                )
                return str(candidate)

        raise ConfigurationError(
            f"No valid recipient for '{request.notification_type}' (given: {request.recipient_id!r})"
        )

    def _is_duplicate(self, request) -> bool:
        booking_id = request.metadata.get("bookingId")
        if request.notification_type not in DEDUPLICATED_TYPES or not booking_id:
            return False

        cutoff = datetime.now(UTC) - DEDUP_WINDOW
        repo = current_domain.repository_for(Notification)
        existing = (
            repo._dao.query.filter(
                notification_type=request.notification_type,
                booking_id=str(booking_id),
                created_at__gte=cutoff,
            )
            .all()
            .items
        )
        return bool(existing)

    def _create(self, request, context, content):
        references = dict(request.metadata)
        if context.booking is not None:
            references.setdefault("bookingId", str(context.booking.id))
        if context.program is not None:
            references.setdefault("programId", str(context.program.id))
        if context.payment is not None:
            references.setdefault("paymentId", str(context.payment.id))

        additional_data = {
            **(request.metadata.get("additionalData") or {}),
            "requiresAction": content["data"].get("requiresAction", request.needs_action()),
            "validActions": content["data"].get("validActions", []),
        }

        return Notification.create(
            recipient_id=request.recipient_id,
            notification_type=request.notification_type,
            title=content["title"],
            message=content["message"],
            sender_id=request.sender_id if is_valid_recipient(request.sender_id) else None,
            sub_type=request.sub_type,
            category=request.category,
            priority=request.priority,
            data=content["data"],
            references=references,
            additional_data=additional_data,
            actions=content["actions"],
            channels=request.resolved_channels(),
            group_id=request.group_id,
            group_order=request.group_order,
        )

    def _fan_out(self, notification, request, context, content):
        """Deliver on each channel. One channel's failure never affects another."""
        for channel in notification.get_channels():
            try:
                status = self._deliver(channel, notification, request, context, content)
            except ChannelDeliveryError as exc:
                logger.error(
                    "Channel delivery failed",
                    notification_id=str(notification.id),
                    channel=exc.channel,
                    error=str(exc),
                )
                notification.record_delivery(channel, DeliveryStatus.FAILED.value, error=str(exc))
                continue
            except Exception as exc:
                logger.exception(
                    "Unexpected channel error",
                    notification_id=str(notification.id),
                    channel=channel,
                )
                notification.record_delivery(channel, DeliveryStatus.FAILED.value, error=str(exc))
                continue

            if status is not None:
                notification.record_delivery(channel, status)

    def _deliver(self, channel, notification, request, context, content):
        if channel == NotificationChannel.IN_APP.value:
            sender = self.directory.get_user(str(notification.sender_id)) if notification.sender_id else None
            return self.in_app.deliver(notification, context=context, sender=sender)
        if channel == NotificationChannel.EMAIL.value:
            return self.email.deliver(notification, request, content)
        if channel == NotificationChannel.PUSH.value:
            # No push transport yet; the request is kept for a later sender
            return DeliveryStatus.PENDING.value
        raise ChannelDeliveryError(channel, f"Unknown channel: {channel}")


def send_notification(config, context=None):
    """Send one notification with the configured adapters."""
    return NotificationDispatcher().send(config, context=context)
