"""Notification type registry.

Static, process-wide table describing every notification type: its
category, priority, default channels, whether the recipient is expected to
act, and which action verbs the UI may offer. The table is built once at
import and exposed read-only.

Unknown types are not fatal: ``lookup`` returns a conservative default
(system category, low priority, in-app only) and logs a warning.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

import structlog

logger = structlog.get_logger(__name__)


class NotificationCategory(Enum):
    BOOKING = "booking"
    SESSION = "session"
    PAYMENT = "payment"
    CONNECTION = "connection"
    ACHIEVEMENT = "achievement"
    RESOURCE = "resource"
    MESSAGE = "message"
    SYSTEM = "system"
    PROFILE = "profile"
    REVIEW = "review"


class NotificationPriority(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class NotificationChannel(Enum):
    IN_APP = "in_app"
    EMAIL = "email"
    PUSH = "push"


@dataclass(frozen=True)
class NotificationTypeSpec:
    category: str
    priority: str
    default_channels: tuple[str, ...]
    requires_action: bool
    valid_actions: tuple[str, ...]


_IN_APP = (NotificationChannel.IN_APP.value,)
_IN_APP_EMAIL = (NotificationChannel.IN_APP.value, NotificationChannel.EMAIL.value)
_EMAIL = (NotificationChannel.EMAIL.value,)


def _entry(category, priority, channels=_IN_APP_EMAIL, requires_action=False, actions=()):
    return NotificationTypeSpec(
        category=category.value,
        priority=priority.value,
        default_channels=tuple(channels),
        requires_action=requires_action,
        valid_actions=tuple(actions),
    )


_B = NotificationCategory.BOOKING
_S = NotificationCategory.SESSION
_P = NotificationCategory.PAYMENT
_R = NotificationCategory.REVIEW
_SYS = NotificationCategory.SYSTEM
_PRO = NotificationCategory.PROFILE

_HIGH = NotificationPriority.HIGH
_MED = NotificationPriority.MEDIUM
_LOW = NotificationPriority.LOW

DEFAULT_TYPE_SPEC = _entry(_SYS, _LOW, channels=_IN_APP)

NOTIFICATION_TYPES = MappingProxyType(
    {
        # Booking
        "booking_request": _entry(_B, _HIGH, requires_action=True, actions=("accept", "decline", "suggest")),
        "booking_confirmed": _entry(_B, _MED, requires_action=True, actions=("view", "reschedule", "cancel")),
        "booking_confirmed_with_payment": _entry(_B, _MED, actions=("view", "reschedule", "cancel")),
        "booking_declined": _entry(_B, _MED, actions=("view",)),
        "booking_cancelled": _entry(_B, _HIGH, actions=("view",)),
        "booking_rescheduled": _entry(_B, _MED, actions=("view", "cancel")),
        "booking_reminder": _entry(_B, _MED, actions=("view",)),
        "booking_cancelled_by_you": _entry(_B, _HIGH, actions=("view_receipt",)),
        "booking_cancelled_by_coach": _entry(_B, _HIGH, actions=("view_booking_details",)),
        "client_cancelled_booking": _entry(_B, _MED, actions=("view_booking_details",)),
        "your_booking_cancellation_confirmed": _entry(_B, _LOW),
        "coach_booking_request": _entry(
            _B, _HIGH, requires_action=True, actions=("accept_by_client", "decline_by_client")
        ),
        "booking_confirmed_by_client": _entry(_B, _MED, actions=("view",)),
        "booking_declined_by_client": _entry(_B, _MED, actions=("view",)),
        # Webinars
        "webinar_registration_confirmed_client": _entry(_B, _MED, actions=("view_webinar_details", "add_to_calendar")),
        "webinar_new_attendee_coach": _entry(_B, _MED, actions=("view_webinar_details", "view_attendee_list")),
        "webinar_booking_failed_full": _entry(_B, _HIGH, actions=("view_available_webinars",)),
        "webinar_registration_cancelled_by_you": _entry(_B, _MED, actions=("view_available_webinars",)),
        "webinar_attendee_cancelled": _entry(_B, _LOW, channels=_IN_APP, actions=("view_attendee_list",)),
        "webinar_rescheduled_action_required": _entry(
            _B, _HIGH, requires_action=True, actions=("confirm_rescheduled_webinar", "decline_rescheduled_webinar")
        ),
        # Rescheduling
        "reschedule_confirmed_auto_client": _entry(_B, _MED, actions=("view", "cancel")),
        "reschedule_confirmed_auto_coach": _entry(_B, _MED, actions=("view",)),
        "reschedule_request_sent_to_coach": _entry(_B, _MED, actions=("view_booking_details",)),
        "client_requested_reschedule": _entry(
            _B,
            _HIGH,
            requires_action=True,
            actions=(
                "approve_reschedule_request",
                "decline_reschedule_request",
                "counter_propose_reschedule_request",
                "view_booking_details",
            ),
        ),
        "reschedule_approved_by_coach": _entry(_B, _MED, actions=("view_booking_details",)),
        "reschedule_declined_by_coach": _entry(_B, _MED, actions=("view_booking_details", "contact_coach")),
        "coach_proposed_new_reschedule_time": _entry(
            _B,
            _HIGH,
            requires_action=True,
            actions=(
                "client_accept_coach_proposal",
                "client_decline_coach_proposal",
                "client_propose_new_time_to_coach",
                "view_booking_details",
            ),
        ),
        # Refund requests
        "refund_request_for_coach": _entry(_B, _HIGH, requires_action=True, actions=("review_refund_request",)),
        "refund_request_escalated": _entry(_B, _MED, actions=("view_dispute_details",)),
        # Sessions
        "session_starting_soon": _entry(_S, _HIGH, actions=("join_session",)),
        "session_completed": _entry(_S, _MED, actions=("view_session",)),
        "session_ended": _entry(_S, _MED, channels=_IN_APP, actions=("view_session", "rate_session")),
        "overtime_prompt": _entry(
            _S,
            _HIGH,
            channels=_IN_APP,
            actions=("end_session", "free_overtime", "paid_overtime", "confirm_payment", "decline_overtime"),
        ),
        "overtime_declined": _entry(_S, _HIGH, channels=_IN_APP, actions=("view",)),
        "session_terminated": _entry(_S, _HIGH, channels=_IN_APP, actions=("view",)),
        "session_continued": _entry(_S, _HIGH, channels=_IN_APP, actions=("view",)),
        # Payments
        "payment_received": _entry(_P, _MED, actions=("view",)),
        "payment_failed": _entry(_P, _HIGH, requires_action=True, actions=("retry", "view")),
        "payment_reminder": _entry(_P, _MED, requires_action=True, actions=("pay_now",)),
        "payment_made_by_user": _entry(_P, _MED, channels=_IN_APP, actions=("view",)),
        "payment_refunded": _entry(_P, _MED, actions=("view_transaction_history",)),
        "refund_processed": _entry(_P, _MED, actions=("view_transaction_history",)),
        "refund_processed_coach": _entry(_P, _MED, actions=("view_transaction_history",)),
        "refund_processed_client": _entry(_P, _MED, actions=("view_booking_details",)),
        "refund_failed_notification": _entry(_P, _HIGH, requires_action=True, actions=("contact_support",)),
        "in_session_payment_failed": _entry(
            _P, _HIGH, channels=_IN_APP, actions=("continue_session", "terminate_session")
        ),
        "overtime_payment_captured": _entry(_P, _MED, actions=("view_receipt", "view_booking")),
        "overtime_payment_released": _entry(_P, _LOW, actions=("view_booking",)),
        "overtime_payment_collected": _entry(_P, _MED, actions=("view_payout", "view_booking")),
        "overtime_payment_capture_failed": _entry(
            _P, _HIGH, requires_action=True, actions=("retry_capture", "contact_support", "view_booking")
        ),
        "live_session_receipt_client": _entry(_P, _MED, actions=("view_receipt", "book_again")),
        "live_session_earnings_coach": _entry(_P, _MED, actions=("view_earnings_summary",)),
        "new_earning_coach": _entry(_P, _MED, actions=("view_earnings_summary",)),
        "payout_on_hold": _entry(_P, _MED, actions=("view_earnings_summary",)),
        "payout_released": _entry(_P, _MED, actions=("view_earnings_summary",)),
        "payout_initiated": _entry(_P, _MED, actions=("view_earnings_summary",)),
        # Programs
        "program_purchase_confirmed": _entry(_P, _HIGH, actions=("view_program",)),
        "program_sale_coach": _entry(_P, _MED, actions=("view_program_details",)),
        "program_comment_posted": _entry(
            NotificationCategory.RESOURCE, _LOW, channels=_IN_APP, actions=("view_lesson",)
        ),
        "program_comment_reply": _entry(
            NotificationCategory.MESSAGE, _MED, requires_action=True, actions=("view_comment", "reply")
        ),
        "new_program_review": _entry(_R, _MED, actions=("view_review", "view_program")),
        "program_assignment_submitted": _entry(
            _S, _MED, channels=_IN_APP, requires_action=True, actions=("review_assignment",)
        ),
        "program_completed": _entry(
            NotificationCategory.ACHIEVEMENT, _MED, channels=_IN_APP, actions=("view_program", "leave_review")
        ),
        # Reviews
        "review_prompt_coach": _entry(_R, _HIGH, requires_action=True, actions=("review",)),
        "review_prompt_client": _entry(_R, _HIGH, requires_action=True, actions=("review",)),
        # Moderation
        "user_account_warning": _entry(_SYS, _HIGH, actions=("contact_support",)),
        "user_content_hidden": _entry(_SYS, _HIGH, actions=("contact_support",)),
        "user_account_suspended": _entry(_SYS, _HIGH, actions=("contact_support",)),
        "report_actioned": _entry(_SYS, _LOW, channels=_IN_APP),
        "report_dismissed": _entry(_SYS, _LOW, channels=_IN_APP),
        # Profile and account
        "coach_verification_approved": _entry(_PRO, _MED, actions=("view_profile", "update_availability")),
        "coach_verification_rejected": _entry(
            _PRO, _HIGH, requires_action=True, actions=("resubmit_verification", "contact_support")
        ),
        "verification_expiring_soon": _entry(_PRO, _MED, requires_action=True, actions=("renew_verification",)),
        "welcome": _entry(_SYS, _MED, channels=_EMAIL),
        "email_verification": _entry(_SYS, _HIGH, channels=_EMAIL, requires_action=True),
        "password_reset": _entry(_SYS, _HIGH, channels=_EMAIL, requires_action=True),
    }
)

# Types that are not about a booking, payment or program
CONTEXT_FREE_TYPES = frozenset(
    {
        "user_account_warning",
        "report_actioned",
        "user_content_hidden",
        "user_account_suspended",
        "report_dismissed",
        "coach_verification_approved",
        "coach_verification_rejected",
        "verification_expiring_soon",
        "welcome",
        "email_verification",
        "password_reset",
        "payout_initiated",
    }
)

# Emails sent regardless of the recipient's preferences
MANDATORY_EMAIL_TYPES = frozenset({"email_verification", "password_reset", "user_account_suspended"})


def is_registered(notification_type: str) -> bool:
    return notification_type in NOTIFICATION_TYPES


def is_context_free(notification_type: str) -> bool:
    return notification_type in CONTEXT_FREE_TYPES


def lookup(notification_type: str) -> NotificationTypeSpec:
    """Return the registry entry for a type, or the conservative default."""
    spec = NOTIFICATION_TYPES.get(notification_type)
    if spec is None:
        logger.warning("Unregistered notification type, using defaults", notification_type=notification_type)
        return DEFAULT_TYPE_SPEC
    return spec
