"""Payment templates — receipts, reminders, failures, refunds, earnings and payouts."""

from notifications.templates.formatting import (
    booking_fields,
    display_date,
    format_amount,
    pay_now_action,
    person_name,
    require_booking,
    require_coach,
    resolve_currency,
)


def _money(metadata) -> dict:
    return {"amount": format_amount(metadata), "currency": resolve_currency(metadata)}


class PaymentReceivedTemplate:
    """Payer's receipt. A payment for a program reads as a program purchase."""

    notification_types = ("payment_received",)

    @staticmethod
    def render(request, context) -> dict:
        metadata = request.metadata
        payment_id = str(context.payment.id) if context.payment else metadata.get("paymentId")

        if context.program is not None and context.booking is None:
            return {
                "title": "notifications:program_purchase_confirmed.title",
                "message": "notifications:program_purchase_confirmed.message",
                "data": {
                    "programId": str(context.program.id),
                    "programTitle": context.program.title,
                    "paymentId": payment_id,
                    **_money(metadata),
                    "paymentStatus": "completed",
                    "status": "completed",
                },
            }

        booking = require_booking(request, context)
        return {
            "title": "notifications:payment_received.title",
            "message": "notifications:payment_received.message",
            "data": {
                "bookingId": str(booking.id),
                "bookingTime": booking_fields(booking)["bookingTime"],
                "sessionType": booking.session_type or "Session",
                "paymentId": payment_id,
                **_money(metadata),
                "paymentStatus": "completed",
                "status": "confirmed",
            },
        }


class PaymentMadeByUserTemplate:
    """Coach learns a client paid, for a session or a program."""

    notification_types = ("payment_made_by_user",)

    @staticmethod
    def render(request, context) -> dict:
        metadata = request.metadata
        additional = metadata.get("additionalData") or {}
        is_program_sale = additional.get("type") == "program_purchase" or (
            context.program is not None and context.booking is None
        )

        if is_program_sale:
            return {
                "title": "notifications:program_sale_coach.title",
                "message": "notifications:program_sale_coach.message",
                "data": {
                    "programId": str(context.program.id) if context.program else metadata.get("programId"),
                    "clientName": metadata.get("clientName") or "A user",
                    "programTitle": (context.program.title if context.program else None)
                    or metadata.get("sessionType")
                    or "your program",
                    **_money(metadata),
                    "paymentStatus": "completed",
                    "status": "completed",
                },
            }

        booking = require_booking(request, context)
        payment_status = metadata.get("paymentStatus") or booking.payment_status or "completed"
        return {
            "title": "notifications:payment_made_by_user.title",
            "message": "notifications:payment_made_by_user.message",
            "data": {
                **booking_fields(booking),
                "clientName": metadata.get("clientName") or person_name(booking.user, "A participant"),
                **_money(metadata),
                "paymentStatus": payment_status,
                "status": "confirmed" if payment_status == "completed" else (booking.status or "pending"),
                "date": metadata.get("date") or display_date(booking.start),
            },
        }


class PaymentReminderTemplate:
    notification_types = ("payment_reminder",)

    @staticmethod
    def render(request, context) -> dict:
        booking = require_booking(request, context)
        coach = require_coach(request, context)
        return {
            "title": "notifications:payment_reminder.title",
            "message": "notifications:payment_reminder.message",
            "data": {
                **booking_fields(booking),
                "name": coach.full_name,
                "sessionStart": booking_fields(booking)["bookingTime"],
                "paymentStatus": "pending",
                **_money(request.metadata),
            },
            "actions": [pay_now_action(booking.id)],
        }


class PaymentFailedTemplate:
    notification_types = (
        "payment_failed",
        "in_session_payment_failed",
        "overtime_payment_capture_failed",
        "refund_failed_notification",
    )

    @staticmethod
    def render(request, context) -> dict:
        data = {**_money(request.metadata), "reason": request.metadata.get("reason"), "paymentStatus": "failed"}
        if context.booking is not None:
            data = {**booking_fields(context.booking), **data}
        if context.payment is not None:
            data["paymentId"] = str(context.payment.id)
        return {
            "title": f"notifications:{request.notification_type}.title",
            "message": f"notifications:{request.notification_type}.message",
            "data": data,
        }


class RefundProcessedTemplate:
    notification_types = (
        "payment_refunded",
        "refund_processed",
        "refund_processed_client",
        "refund_processed_coach",
    )

    @staticmethod
    def render(request, context) -> dict:
        data = {
            **_money(request.metadata),
            "refundType": request.metadata.get("refundType"),
            "status": "refunded",
        }
        if context.booking is not None:
            data["bookingId"] = str(context.booking.id)
            data["sessionType"] = context.booking.session_type or "Session"
        if context.payment is not None:
            data["paymentId"] = str(context.payment.id)
        return {
            "title": f"notifications:{request.notification_type}.title",
            "message": f"notifications:{request.notification_type}.message",
            "data": data,
        }


class EarningsTemplate:
    """Coach earnings and client receipts for completed sessions and overtime."""

    notification_types = (
        "new_earning_coach",
        "live_session_earnings_coach",
        "live_session_receipt_client",
        "overtime_payment_captured",
        "overtime_payment_released",
        "overtime_payment_collected",
        "payout_on_hold",
        "payout_released",
    )

    @staticmethod
    def render(request, context) -> dict:
        data = {**_money(request.metadata), "status": request.metadata.get("status") or "completed"}
        if context.booking is not None:
            data["bookingId"] = str(context.booking.id)
            data["sessionType"] = context.booking.session_type or "Session"
        if context.payment is not None:
            data["paymentId"] = str(context.payment.id)
        if "durationMinutes" in request.metadata:
            data["durationMinutes"] = request.metadata["durationMinutes"]
        return {
            "title": f"notifications:{request.notification_type}.title",
            "message": f"notifications:{request.notification_type}.message",
            "data": data,
        }


class PayoutInitiatedTemplate:
    """Context-free: the payout is described entirely by its metadata."""

    notification_types = ("payout_initiated",)

    @staticmethod
    def render(request, context) -> dict:
        return {
            "title": "notifications:payout_initiated.title",
            "message": "notifications:payout_initiated.message",
            "data": {
                "payoutAmount": format_amount(request.metadata),
                "currency": resolve_currency(request.metadata),
                "status": "processed",
            },
        }
