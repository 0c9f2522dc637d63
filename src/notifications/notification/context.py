"""Context resolution — what a notification is about.

A notification's subject is a booking, a payment or a program, or nothing
at all for context-free types. ``NotificationContext`` is the tagged union
the renderer works with; ``ContextResolver`` builds it once per send by
following metadata references through the directory.
"""

from dataclasses import dataclass
from enum import Enum

import structlog
from notifications.directory.port import BookingRecord, PaymentRecord, ProgramRecord
from notifications.errors import ContextResolutionError
from notifications.notification.types import is_context_free, is_registered

logger = structlog.get_logger(__name__)

# Types whose bookingId may actually name a Payment
PAYMENT_FALLBACK_TYPES = frozenset({"payment_received", "payment_made_by_user"})


class ContextKind(Enum):
    BOOKING = "booking"
    PAYMENT = "payment"
    PROGRAM = "program"
    NONE = "none"


@dataclass(frozen=True)
class NotificationContext:
    kind: ContextKind
    booking: BookingRecord | None = None
    payment: PaymentRecord | None = None
    program: ProgramRecord | None = None

    @classmethod
    def empty(cls) -> "NotificationContext":
        return cls(kind=ContextKind.NONE)

    @classmethod
    def of(cls, entity) -> "NotificationContext":
        """Wrap a directory record (or pass a context through unchanged)."""
        if entity is None:
            return cls.empty()
        if isinstance(entity, NotificationContext):
            return entity
        if isinstance(entity, BookingRecord):
            return cls(kind=ContextKind.BOOKING, booking=entity)
        if isinstance(entity, PaymentRecord):
            return cls(
                kind=ContextKind.PAYMENT,
                payment=entity,
                booking=entity.booking,
                program=entity.program,
            )
        if isinstance(entity, ProgramRecord):
            return cls(kind=ContextKind.PROGRAM, program=entity)
        raise ContextResolutionError(f"Unsupported notification context: {type(entity).__name__}")

    @property
    def subject(self):
        if self.kind == ContextKind.BOOKING:
            return self.booking
        if self.kind == ContextKind.PAYMENT:
            return self.payment
        if self.kind == ContextKind.PROGRAM:
            return self.program
        return None

    @property
    def subject_id(self) -> str | None:
        subject = self.subject
        return str(subject.id) if subject is not None else None

    @property
    def coach(self):
        if self.booking is not None and self.booking.coach is not None:
            return self.booking.coach
        if self.program is not None:
            return self.program.coach
        return None

    @property
    def client(self):
        return self.booking.user if self.booking is not None else None

    @property
    def user_id(self) -> str | None:
        """The client side of the context: booking user or payment payer."""
        if self.kind == ContextKind.PAYMENT and self.payment.payer_id:
            return str(self.payment.payer_id)
        if self.booking is not None and self.booking.user_id:
            return str(self.booking.user_id)
        return None

    @property
    def coach_id(self) -> str | None:
        if self.booking is not None and self.booking.coach_id:
            return str(self.booking.coach_id)
        if self.kind == ContextKind.PAYMENT and self.payment.recipient_id:
            return str(self.payment.recipient_id)
        if self.program is not None and self.program.coach_id:
            return str(self.program.coach_id)
        return None

    def is_populated(self) -> bool:
        subject = self.subject
        return subject is not None and subject.is_populated()

    def summary(self) -> dict | None:
        """Compact view of the subject for realtime payloads."""
        if self.kind == ContextKind.NONE:
            return None
        summary = {"kind": self.kind.value, "id": self.subject_id}
        if self.booking is not None:
            summary["booking"] = {
                "id": str(self.booking.id),
                "start": self.booking.start.isoformat() if self.booking.start else None,
                "end": self.booking.end.isoformat() if self.booking.end else None,
                "status": self.booking.status,
                "sessionType": self.booking.session_type,
                "coach": self.booking.coach.summary() if self.booking.coach else None,
                "user": self.booking.user.summary() if self.booking.user else None,
            }
        if self.program is not None:
            summary["program"] = {"id": str(self.program.id), "title": self.program.title}
        if self.payment is not None:
            summary["payment"] = {
                "id": str(self.payment.id),
                "amount": self.payment.amount,
                "currency": self.payment.currency,
                "status": self.payment.status,
            }
        return summary


class ContextResolver:
    """Resolves and populates the subject a notification needs. Read-only."""

    def __init__(self, directory):
        self.directory = directory

    def resolve(self, notification_type, metadata=None, context=None) -> NotificationContext:
        if is_context_free(notification_type):
            return NotificationContext.empty()

        metadata = metadata or {}
        supplied = NotificationContext.of(context)
        if supplied.kind != ContextKind.NONE and supplied.is_populated():
            return supplied

        booking_id = metadata.get("bookingId") or (
            supplied.booking.id if supplied.kind == ContextKind.BOOKING else None
        )
        program_id = metadata.get("programId") or (
            supplied.program.id if supplied.kind == ContextKind.PROGRAM else None
        )
        payment_id = metadata.get("paymentId") or (
            supplied.payment.id if supplied.kind == ContextKind.PAYMENT else None
        )

        if booking_id:
            return self._resolve_booking(notification_type, str(booking_id))
        if program_id:
            program = self.directory.get_program(str(program_id))
            if program is None:
                raise ContextResolutionError(f"Program {program_id} not found")
            return NotificationContext.of(program)
        if payment_id:
            return self._resolve_payment(str(payment_id))

        if not is_registered(notification_type):
            logger.debug(
                "Unregistered type without a reference, rendering without context",
                notification_type=notification_type,
            )
            return NotificationContext.empty()

        raise ContextResolutionError(
            f"Notification type '{notification_type}' requires a booking, payment or program reference"
        )

    def _resolve_booking(self, notification_type, booking_id) -> NotificationContext:
        booking = self.directory.get_booking(booking_id)
        if booking is not None:
            return NotificationContext.of(booking)

        if notification_type in PAYMENT_FALLBACK_TYPES:
            logger.debug(
                "Booking not found, trying payment",
                notification_type=notification_type,
                reference_id=booking_id,
            )
            return self._resolve_payment(booking_id)

        raise ContextResolutionError(f"Booking {booking_id} not found")

    def _resolve_payment(self, payment_id) -> NotificationContext:
        payment = self.directory.get_payment(payment_id)
        if payment is None:
            raise ContextResolutionError(f"Payment {payment_id} not found")
        return NotificationContext.of(payment)
