"""Email channel — turns a stored notification into a queued email job.

The mail worker renders and sends the email; this channel only decides
whether an email goes out and assembles the job. Subjects and bodies are
localization keys resolved by the worker in the job's language.
"""

import os
from types import MappingProxyType

import structlog
from notifications.errors import ChannelDeliveryError
from notifications.notification.notification import DeliveryStatus
from notifications.notification.types import MANDATORY_EMAIL_TYPES, NotificationChannel
from notifications.preference.preference import find_preference

logger = structlog.get_logger(__name__)

DEFAULT_LANGUAGE = "de"
DEFAULT_FRONTEND_URL = "http://localhost:3000"

# Notification type -> mail provider template id
EMAIL_TEMPLATES = MappingProxyType(
    {
        "welcome": 6120101,
        "email_verification": 6120102,
        "password_reset": 6120103,
        "booking_request": 6120201,
        "booking_confirmed": 6120202,
        "booking_declined": 6120203,
        "booking_cancelled": 6120204,
        "booking_cancelled_by_coach": 6120205,
        "client_cancelled_booking": 6120206,
        "booking_rescheduled": 6120207,
        "booking_reminder": 6120208,
        "coach_booking_request": 6120209,
        "webinar_registration_confirmed_client": 6120210,
        "client_requested_reschedule": 6120211,
        "coach_proposed_new_reschedule_time": 6120212,
        "session_starting_soon": 6120301,
        "payment_received": 6120401,
        "payment_failed": 6120402,
        "payment_reminder": 6120403,
        "refund_processed_client": 6120404,
        "refund_processed_coach": 6120405,
        "live_session_receipt_client": 6120406,
        "payout_initiated": 6120407,
        "program_purchase_confirmed": 6120501,
        "program_sale_coach": 6120502,
        "review_prompt_client": 6120601,
        "review_prompt_coach": 6120602,
        "user_account_warning": 6120701,
        "user_account_suspended": 6120702,
        "coach_verification_approved": 6120801,
        "coach_verification_rejected": 6120802,
        "verification_expiring_soon": 6120803,
    }
)

_FOOTER_KEYS = ("footer_link_settings", "footer_link_help", "footer_text_1")

# Rendered data that only drives the in-app UI
_UI_ONLY_KEYS = frozenset({"validActions", "requiresAction"})

_WELCOME_KEYS = (
    "getting_started_text",
    "usp_title",
    "usp_1_title",
    "usp_1_text",
    "usp_2_title",
    "usp_2_text",
    "usp_3_title",
    "usp_3_text",
    "testimonial_quote",
    "testimonial_author",
)


def frontend_url() -> str:
    return os.environ.get("FRONTEND_URL", DEFAULT_FRONTEND_URL).rstrip("/")


def _email_keys(prefix, names) -> dict:
    return {name: f"{prefix}.email.{name}" for name in names}


def _rendered_fields(content) -> dict:
    if not content:
        return {}
    fields = {key: value for key, value in (content.get("data") or {}).items() if key not in _UI_ONLY_KEYS}
    fields["title"] = content.get("title")
    fields["message"] = content.get("message")
    return fields


def build_template_data(notification_type, user, language, metadata, content=None) -> dict:
    """Variables handed to the provider template.

    Rendered values (formatted amounts, names, session details) override
    raw metadata of the same name.
    """
    base_url = frontend_url()
    data = {
        "lang": language,
        "firstName": user.first_name,
        "button_url": metadata.get("button_url") or f"{base_url}/dashboard",
        **metadata,
        **_rendered_fields(content),
        "settings_url": f"{base_url}/settings",
        "help_url": f"{base_url}/help",
        **_email_keys("welcome", _FOOTER_KEYS),
        **_email_keys(notification_type, ("subject", "headline", "main_body_text", "button_text")),
    }

    if notification_type == "welcome":
        data.update(_email_keys("welcome", _WELCOME_KEYS))
    elif notification_type == "email_verification" and metadata.get("verification_link"):
        data["button_url"] = metadata["verification_link"]

    return data


class EmailChannel:
    """Queues an email job for a notification, honoring user preferences."""

    channel = NotificationChannel.EMAIL.value

    def __init__(self, directory, email_queue):
        self.directory = directory
        self.email_queue = email_queue

    def deliver(self, notification, request, content=None) -> str | None:
        """Queue the email. Returns ``sent`` once queued, None when skipped."""
        notification_type = notification.notification_type
        recipient_id = str(notification.recipient_id)

        template_id = EMAIL_TEMPLATES.get(notification_type)
        if template_id is None:
            logger.warning("No email template for notification type, skipping email", notification_type=notification_type)
            return None

        user = self.directory.get_user(recipient_id)
        if user is None or not user.email:
            logger.error("Recipient not found or has no email", recipient_id=recipient_id)
            return None

        preference = find_preference(recipient_id)
        if notification_type not in MANDATORY_EMAIL_TYPES and preference is not None:
            if not preference.allows_email(notification.category):
                logger.info(
                    "Email suppressed by preferences",
                    recipient_id=recipient_id,
                    notification_type=notification_type,
                    category=notification.category,
                )
                return None

        language = (preference.language if preference else None) or user.language or DEFAULT_LANGUAGE

        job = {
            "notificationType": notification_type,
            "recipientEmail": user.email,
            "language": language,
            "templateData": build_template_data(notification_type, user, language, dict(request.metadata), content),
            "mailjetTemplateId": template_id,
        }

        result = self.email_queue.enqueue(f"send-{notification_type}", job)
        if result.get("status") != "queued":
            raise ChannelDeliveryError(self.channel, result.get("error") or "Email enqueue failed")

        logger.info(
            "Email job queued",
            notification_id=str(notification.id),
            notification_type=notification_type,
            job_id=result.get("job_id"),
            template_id=template_id,
        )
        return DeliveryStatus.SENT.value
