"""Booking status → notification descriptors.

A declarative table says which notifications a booking status produces and
for whom. ``descriptors_for_status`` expands it for one concrete booking:
the ``both`` role becomes a coach and a client descriptor, and a role whose
party is missing from the booking is silently dropped.
"""

from dataclasses import dataclass, field
from types import MappingProxyType

import structlog
from notifications.notification.request import NotificationRequest
from notifications.notification.types import NotificationCategory, NotificationChannel, NotificationPriority

logger = structlog.get_logger(__name__)

COACH = "coach"
CLIENT = "client"
BOTH = "both"

RESPONSE_TIMEOUT_MS = 24 * 60 * 60 * 1000


@dataclass(frozen=True)
class NotificationDescriptor:
    """One notification for one concrete recipient, before rendering."""

    notification_type: str
    recipient_role: str
    recipient_id: str
    priority: str
    category: str
    channels: tuple[str, ...]
    requires_action: bool
    actions: tuple[str, ...]
    metadata: dict = field(default_factory=dict)

    def to_request(self, sender_id=None) -> NotificationRequest:
        return NotificationRequest(
            notification_type=self.notification_type,
            recipient_id=self.recipient_id,
            sender_id=sender_id,
            category=self.category,
            priority=self.priority,
            channels=self.channels,
            requires_action=self.requires_action,
            actions=self.actions,
            metadata=dict(self.metadata),
            recipient_role=self.recipient_role,
        )


@dataclass(frozen=True)
class _Rule:
    notification_type: str
    recipient: str
    priority: str
    channels: tuple[str, ...]
    requires_action: bool = False
    actions: tuple[str, ...] = ()
    metadata: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))
    category: str = NotificationCategory.BOOKING.value


_IN_APP = (NotificationChannel.IN_APP.value,)
_IN_APP_EMAIL = (NotificationChannel.IN_APP.value, NotificationChannel.EMAIL.value)
_HIGH = NotificationPriority.HIGH.value
_MEDIUM = NotificationPriority.MEDIUM.value
_LOW = NotificationPriority.LOW.value

BOOKING_STATUS_RULES = MappingProxyType(
    {
        "requested": (
            _Rule(
                "booking_request",
                COACH,
                _HIGH,
                _IN_APP_EMAIL,
                requires_action=True,
                actions=("approve", "decline", "suggest"),
                metadata=MappingProxyType({"actionRequired": True, "responseTimeout": RESPONSE_TIMEOUT_MS}),
            ),
        ),
        "firm_booked": (
            _Rule(
                "booking_confirmed",
                BOTH,
                _MEDIUM,
                _IN_APP_EMAIL,
                requires_action=True,
                actions=("view", "cancel"),
                metadata=MappingProxyType({"instantBooking": True}),
            ),
        ),
        "confirmed": (
            _Rule(
                "booking_confirmed",
                CLIENT,
                _MEDIUM,
                _IN_APP_EMAIL,
                requires_action=True,
                actions=("view", "reschedule", "cancel"),
            ),
            _Rule("booking_confirmed", COACH, _LOW, _IN_APP, actions=("view",)),
        ),
        "declined": (
            _Rule(
                "booking_declined",
                CLIENT,
                _MEDIUM,
                _IN_APP_EMAIL,
                actions=("view",),
                metadata=MappingProxyType({"actionRequired": False, "status": "declined"}),
            ),
        ),
        "cancelled_by_coach": (
            _Rule(
                "booking_cancelled",
                CLIENT,
                _HIGH,
                _IN_APP_EMAIL,
                actions=("view",),
                metadata=MappingProxyType({"cancelledBy": "coach", "requiresRefund": True}),
            ),
        ),
        "cancelled_by_client": (
            _Rule(
                "booking_cancelled",
                COACH,
                _MEDIUM,
                _IN_APP_EMAIL,
                actions=("view",),
                metadata=MappingProxyType({"cancelledBy": "client", "requiresRefund": False}),
            ),
        ),
        "rescheduled": (_Rule("booking_rescheduled", BOTH, _MEDIUM, _IN_APP_EMAIL, actions=("view", "cancel")),),
        "payment_made_by_user": (
            _Rule(
                "payment_made_by_user",
                COACH,
                _MEDIUM,
                _IN_APP,
                actions=("view",),
                metadata=MappingProxyType({"paymentStatus": "completed"}),
                category=NotificationCategory.PAYMENT.value,
            ),
        ),
        "completed": (
            _Rule(
                "review_prompt_coach",
                COACH,
                _HIGH,
                _IN_APP_EMAIL,
                requires_action=True,
                actions=("review",),
                category=NotificationCategory.REVIEW.value,
            ),
            _Rule(
                "review_prompt_client",
                CLIENT,
                _HIGH,
                _IN_APP_EMAIL,
                requires_action=True,
                actions=("review",),
                category=NotificationCategory.REVIEW.value,
            ),
        ),
    }
)


def _recipient_for(role, booking):
    if role == COACH:
        return booking.coach_id or (booking.coach.id if booking.coach else None)
    return booking.user_id or (booking.user.id if booking.user else None)


def _booking_references(booking) -> dict:
    return {
        "bookingId": str(booking.id),
        "sessionType": booking.session_type,
        "startTime": booking.start.isoformat() if booking.start else None,
        "endTime": booking.end.isoformat() if booking.end else None,
        "bookingType": booking.booking_type,
    }


def descriptors_for_status(status, booking, metadata=None) -> list[NotificationDescriptor]:
    """Expand the rules for ``status`` into per-recipient descriptors, in table order."""
    rules = BOOKING_STATUS_RULES.get(status, ())
    descriptors = []

    for rule in rules:
        roles = (COACH, CLIENT) if rule.recipient == BOTH else (rule.recipient,)
        for role in roles:
            recipient_id = _recipient_for(role, booking)
            if not recipient_id:
                logger.debug(
                    "Dropping descriptor without recipient",
                    booking_id=str(booking.id),
                    status=status,
                    notification_type=rule.notification_type,
                    recipient_role=role,
                )
                continue

            merged = {**rule.metadata, **_booking_references(booking), **(metadata or {})}
            descriptors.append(
                NotificationDescriptor(
                    notification_type=rule.notification_type,
                    recipient_role=role,
                    recipient_id=str(recipient_id),
                    priority=rule.priority,
                    category=rule.category,
                    channels=rule.channels,
                    requires_action=rule.requires_action,
                    actions=rule.actions,
                    metadata=merged,
                )
            )

    return descriptors


def descriptors_for_transition(old_status, new_status, booking, metadata=None) -> list[NotificationDescriptor]:
    """Descriptors for a status change. Re-saving the same status produces none."""
    if old_status == new_status:
        return []
    return descriptors_for_status(new_status, booking, metadata)
