"""Booking templates — requests, confirmations, declines, cancellations, reschedules."""

from notifications.errors import ContentGenerationError
from notifications.templates.formatting import (
    PENDING_PAYMENT_STATUSES,
    booking_fields,
    iso,
    pay_now_action,
    person_name,
    require_booking,
    require_coach,
)

COACH_ROLE = "coach"
CLIENT_ROLE = "client"


def recipient_role(request, booking) -> str:
    """Role of the recipient on this booking; explicit role wins."""
    if request.recipient_role:
        return request.recipient_role
    if booking.coach_id and str(request.recipient_id) == str(booking.coach_id):
        return COACH_ROLE
    return CLIENT_ROLE


def _keys(notification_type, variant=None):
    suffix = f"_{variant}" if variant else ""
    return (
        f"notifications:{notification_type}.title{suffix}",
        f"notifications:{notification_type}.message{suffix}",
    )


class BookingRequestTemplate:
    """Coach is asked to accept, decline or suggest another time."""

    notification_types = ("booking_request",)

    @staticmethod
    def render(request, context) -> dict:
        booking = require_booking(request, context)
        require_coach(request, context)
        title, message = _keys(request.notification_type)
        return {
            "title": title,
            "message": message,
            "data": {
                **booking_fields(booking),
                "name": person_name(booking.user, "A client"),
                "clientName": person_name(booking.user, "A client"),
                "responseTimeout": request.metadata.get("responseTimeout"),
            },
        }


class CoachBookingRequestTemplate:
    """Client is asked to accept a session the coach proposed."""

    notification_types = ("coach_booking_request",)

    @staticmethod
    def render(request, context) -> dict:
        booking = require_booking(request, context)
        coach = require_coach(request, context)
        title, message = _keys(request.notification_type)
        return {
            "title": title,
            "message": message,
            "data": {
                **booking_fields(booking),
                "coachName": coach.full_name,
                "sessionTitle": booking.title,
            },
        }


class BookingConfirmedTemplate:
    """Confirmation for either party; webinars and pending payments get their own wording."""

    notification_types = ("booking_confirmed",)

    @staticmethod
    def render(request, context) -> dict:
        booking = require_booking(request, context)
        coach = require_coach(request, context)

        if recipient_role(request, booking) == COACH_ROLE:
            return BookingConfirmedTemplate._for_coach(request, booking)
        return BookingConfirmedTemplate._for_client(request, booking, coach)

    @staticmethod
    def _for_client(request, booking, coach) -> dict:
        webinar_title = (booking.title or booking.session_type) if booking.is_webinar else None
        # Either source flagging pending payment wins
        statuses = (booking.payment_status, request.metadata.get("paymentStatus"))
        payment_status = next(
            (s for s in statuses if s in PENDING_PAYMENT_STATUSES),
            next((s for s in statuses if s), "completed"),
        )

        data = {
            **booking_fields(booking),
            "name": coach.full_name,
            "actionResult": request.metadata.get("actionResult") or booking.status,
            "paymentStatus": payment_status,
        }
        if booking.is_webinar:
            data["webinarTitle"] = webinar_title
            data["webinarLink"] = booking.webinar_link

        variant = None
        leading_actions = []
        if payment_status in PENDING_PAYMENT_STATUSES:
            variant = "payment_required"
            leading_actions = [pay_now_action(booking.id)]

        notification_type = "webinar_registration_confirmed_client" if booking.is_webinar else "booking_confirmed"
        title, message = _keys(notification_type, variant)
        return {"title": title, "message": message, "data": data, "actions": leading_actions}

    @staticmethod
    def _for_coach(request, booking) -> dict:
        if booking.is_webinar:
            attendee = (
                request.metadata.get("attendeeName")
                or request.metadata.get("clientName")
                or person_name(booking.user, "A participant")
            )
            title, message = _keys("webinar_new_attendee_coach")
            return {
                "title": title,
                "message": message,
                "data": {
                    **booking_fields(booking),
                    "attendeeName": attendee,
                    "name": attendee,
                    "webinarTitle": booking.title or booking.session_type,
                    "currentAttendeeCount": booking.attendee_count or 1,
                    "maxAttendees": booking.max_attendees,
                },
                "valid_actions": ["view_webinar_details"] if request.actions is None else None,
            }

        client = booking.user
        if client is None or not client.first_name:
            raise ContentGenerationError(
                f"Missing client data for coach confirmation of booking {booking.id}"
            )

        title, message = _keys("booking_confirmed", "coach")
        return {
            "title": title,
            "message": message,
            "data": {
                **booking_fields(booking),
                "name": client.full_name,
                "actionResult": request.metadata.get("actionResult") or booking.status,
            },
            "valid_actions": ["view"] if request.actions is None else None,
        }


class BookingDeclinedTemplate:
    notification_types = ("booking_declined", "booking_declined_by_client")

    @staticmethod
    def render(request, context) -> dict:
        booking = require_booking(request, context)
        coach = require_coach(request, context)
        title, message = _keys(request.notification_type)
        declined_by = booking.user if request.notification_type == "booking_declined_by_client" else coach
        return {
            "title": title,
            "message": message,
            "data": {
                **booking_fields(booking),
                "name": person_name(declined_by, "The other party"),
                "reason": request.metadata.get("reason"),
            },
        }


class BookingCancelledTemplate:
    """Cancellation seen by the other party, with refund expectations."""

    notification_types = (
        "booking_cancelled",
        "booking_cancelled_by_coach",
        "client_cancelled_booking",
        "booking_cancelled_by_you",
        "your_booking_cancellation_confirmed",
    )

    @staticmethod
    def render(request, context) -> dict:
        booking = require_booking(request, context)
        coach = require_coach(request, context)
        role = recipient_role(request, booking)
        other_party = booking.user if role == COACH_ROLE else coach
        title, message = _keys(request.notification_type)
        return {
            "title": title,
            "message": message,
            "data": {
                **booking_fields(booking),
                "name": person_name(other_party, "The other party"),
                "cancelledBy": request.metadata.get("cancelledBy"),
                "requiresRefund": bool(request.metadata.get("requiresRefund", False)),
                "reason": request.metadata.get("reason"),
            },
        }


class BookingRescheduledTemplate:
    notification_types = (
        "booking_rescheduled",
        "reschedule_confirmed_auto_client",
        "reschedule_confirmed_auto_coach",
        "reschedule_request_sent_to_coach",
        "client_requested_reschedule",
        "reschedule_approved_by_coach",
        "reschedule_declined_by_coach",
        "coach_proposed_new_reschedule_time",
    )

    @staticmethod
    def render(request, context) -> dict:
        booking = require_booking(request, context)
        coach = require_coach(request, context)
        role = recipient_role(request, booking)
        other_party = booking.user if role == COACH_ROLE else coach
        title, message = _keys(request.notification_type)
        return {
            "title": title,
            "message": message,
            "data": {
                **booking_fields(booking),
                "name": person_name(other_party, "The other party"),
                "previousStart": request.metadata.get("previousStart"),
                "previousEnd": request.metadata.get("previousEnd"),
                "proposedStart": request.metadata.get("proposedStart") or iso(booking.start),
                "proposedEnd": request.metadata.get("proposedEnd") or iso(booking.end),
                "message": request.metadata.get("message"),
            },
        }


class BookingReminderTemplate:
    notification_types = ("booking_reminder", "session_starting_soon")

    @staticmethod
    def render(request, context) -> dict:
        booking = require_booking(request, context)
        coach = require_coach(request, context)
        role = recipient_role(request, booking)
        other_party = booking.user if role == COACH_ROLE else coach
        title, message = _keys(request.notification_type)
        return {
            "title": title,
            "message": message,
            "data": {
                **booking_fields(booking),
                "name": person_name(other_party, "The other party"),
                "minutesUntilStart": request.metadata.get("minutesUntilStart"),
            },
        }
