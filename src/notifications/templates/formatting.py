"""Formatting helpers shared by the content templates."""

from numbers import Real

from notifications.errors import ContentGenerationError

DEFAULT_CURRENCY = "CHF"
UNKNOWN_AMOUNT = "unknown"

PENDING_PAYMENT_STATUSES = frozenset({"pending", "payment_required"})


def _is_number(value) -> bool:
    # bool is a Real subclass but never an amount
    return isinstance(value, Real) and not isinstance(value, bool) and value == value


def format_amount(metadata: dict) -> str:
    """Two-decimal amount from ``amount`` or ``amountInCents``.

    Returns ``"unknown"`` when neither is a number. Zero is a real amount.
    """
    amount = metadata.get("amount")
    if _is_number(amount):
        return f"{amount:.2f}"

    cents = metadata.get("amountInCents")
    if _is_number(cents):
        return f"{cents / 100:.2f}"

    return UNKNOWN_AMOUNT


def resolve_currency(metadata: dict) -> str:
    currency = metadata.get("currency")
    return currency.upper() if currency else DEFAULT_CURRENCY


def iso(value):
    return value.isoformat() if value is not None else None


def display_date(value):
    return value.date().isoformat() if value is not None else None


def display_time(value):
    return value.strftime("%H:%M") if value is not None else None


def person_name(user, default):
    if user is None or not user.first_name:
        return default
    return user.full_name


def booking_fields(booking) -> dict:
    """Core booking fields every booking-based template forwards."""
    return {
        "bookingId": str(booking.id),
        "bookingTime": iso(booking.start),
        "endTime": iso(booking.end),
        "duration": booking.duration_minutes,
        "bookingType": booking.booking_type,
        "status": booking.status,
        "date": display_date(booking.start),
        "time": display_time(booking.start),
        "sessionType": booking.session_type or "Session",
    }


def require_booking(request, context):
    if context.booking is None:
        raise ContentGenerationError(f"'{request.notification_type}' needs a booking but none was resolved")
    return context.booking


def require_coach(request, context):
    """The coach must be loaded with a name for any booking-based content."""
    coach = context.coach
    if coach is None or not coach.first_name:
        raise ContentGenerationError(
            f"Missing or incomplete coach data for '{request.notification_type}' on {context.subject_id}"
        )
    return coach


def build_actions(verbs, subject_data=None) -> list[dict]:
    """Turn action verbs into ``{type, label, endpoint, data}`` affordances."""
    return [
        {
            "type": verb,
            "label": verb.replace("_", " ").capitalize(),
            "endpoint": None,
            "data": dict(subject_data or {}),
        }
        for verb in verbs
    ]


def pay_now_action(booking_id) -> dict:
    return {
        "type": "pay_now",
        "label": "Pay Now",
        "endpoint": f"/bookings/{booking_id}/pay",
        "data": {"bookingId": str(booking_id)},
    }
