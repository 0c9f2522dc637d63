"""Template registry — maps notification types to content templates.

Each template is a class with a static ``render(request, context)`` that
returns ``{"title", "message", "data"}`` (plus optional leading ``actions``
and a ``valid_actions`` override). Titles and messages are localization
keys resolved by the client or the email worker.

Types without a template fall back to ``GenericTemplate``, which echoes the
raw type and forwards the subject's core fields.
"""

import structlog
from notifications.errors import ContentGenerationError
from notifications.templates.booking import (
    BookingCancelledTemplate,
    BookingConfirmedTemplate,
    BookingDeclinedTemplate,
    BookingRequestTemplate,
    BookingRescheduledTemplate,
    BookingReminderTemplate,
    CoachBookingRequestTemplate,
    recipient_role,
)
from notifications.templates.formatting import booking_fields, build_actions, person_name
from notifications.templates.moderation import (
    AccountSuspendedTemplate,
    ReportOutcomeTemplate,
    UserAccountWarningTemplate,
    UserContentHiddenTemplate,
)
from notifications.templates.payment import (
    EarningsTemplate,
    PaymentFailedTemplate,
    PaymentMadeByUserTemplate,
    PaymentReceivedTemplate,
    PaymentReminderTemplate,
    PayoutInitiatedTemplate,
    RefundProcessedTemplate,
)
from notifications.templates.program import ProgramActivityTemplate, ProgramPurchaseTemplate
from notifications.templates.review_prompt import ReviewPromptTemplate
from notifications.templates.welcome import (
    CoachVerificationApprovedTemplate,
    CoachVerificationRejectedTemplate,
    EmailOnlyTemplate,
    VerificationExpiringSoonTemplate,
)

logger = structlog.get_logger(__name__)


class GenericTemplate:
    """Fallback for types without a dedicated template."""

    @staticmethod
    def render(request, context) -> dict:
        data = {}
        booking = context.booking
        if booking is not None:
            other_party = booking.user if recipient_role(request, booking) == "coach" else booking.coach
            data.update(booking_fields(booking))
            data["name"] = person_name(other_party, "The other party")
            data["actionResult"] = request.metadata.get("actionResult") or booking.status
        if context.program is not None:
            data["programId"] = str(context.program.id)
            data["programTitle"] = context.program.title
        if context.payment is not None:
            data["paymentId"] = str(context.payment.id)
            data.setdefault("status", context.payment.status)
        return {"title": request.notification_type, "message": request.notification_type, "data": data}


_TEMPLATES = (
    BookingRequestTemplate,
    CoachBookingRequestTemplate,
    BookingConfirmedTemplate,
    BookingDeclinedTemplate,
    BookingCancelledTemplate,
    BookingRescheduledTemplate,
    BookingReminderTemplate,
    PaymentReceivedTemplate,
    PaymentMadeByUserTemplate,
    PaymentReminderTemplate,
    PaymentFailedTemplate,
    RefundProcessedTemplate,
    EarningsTemplate,
    PayoutInitiatedTemplate,
    ProgramPurchaseTemplate,
    ProgramActivityTemplate,
    ReviewPromptTemplate,
    UserAccountWarningTemplate,
    UserContentHiddenTemplate,
    AccountSuspendedTemplate,
    ReportOutcomeTemplate,
    EmailOnlyTemplate,
    CoachVerificationApprovedTemplate,
    CoachVerificationRejectedTemplate,
    VerificationExpiringSoonTemplate,
)

TEMPLATE_REGISTRY: dict[str, type] = {
    notification_type: template_cls
    for template_cls in _TEMPLATES
    for notification_type in template_cls.notification_types
}


def get_template(notification_type: str):
    """Look up a template class by notification type, falling back to the generic one."""
    template_cls = TEMPLATE_REGISTRY.get(notification_type)
    if template_cls is None:
        logger.debug("No template for notification type, using generic", notification_type=notification_type)
        return GenericTemplate
    return template_cls


def _subject_reference(context) -> dict:
    if context.booking is not None:
        return {"bookingId": str(context.booking.id)}
    if context.program is not None:
        return {"programId": str(context.program.id)}
    if context.payment is not None:
        return {"paymentId": str(context.payment.id)}
    return {}


def render_content(request, context) -> dict:
    """Render ``{title, message, data, actions}`` for one request.

    ``data.validActions`` comes from the template, else the request
    override, else the registry. Template-supplied actions (such as
    ``pay_now``) lead the action list.
    """
    template_cls = get_template(request.notification_type)
    content = template_cls.render(request, context)

    if not content.get("title") or not content.get("message"):
        raise ContentGenerationError(f"Template for '{request.notification_type}' produced no title or message")

    valid_actions = content.get("valid_actions")
    if valid_actions is None:
        valid_actions = request.valid_actions()

    data = dict(content.get("data") or {})
    data["validActions"] = list(valid_actions)
    data.setdefault("requiresAction", request.needs_action())

    leading = list(content.get("actions") or [])
    leading_types = {action["type"] for action in leading}
    actions = leading + build_actions(
        [verb for verb in valid_actions if verb not in leading_types],
        _subject_reference(context),
    )

    return {
        "title": content["title"],
        "message": content["message"],
        "data": data,
        "actions": actions,
    }
