"""In-memory directory — records registered by tests and local development."""

from collections import deque
from dataclasses import replace

from notifications.directory.port import (
    BookingRecord,
    DirectoryPort,
    PaymentRecord,
    ProgramRecord,
    UserRecord,
)

# Most recent lookups kept for assertions
LOOKUP_HISTORY = 256


class InMemoryDirectory(DirectoryPort):
    """Directory backed by plain dicts. Lookups populate associations."""

    def __init__(self):
        self.users: dict[str, UserRecord] = {}
        self.bookings: dict[str, BookingRecord] = {}
        self.payments: dict[str, PaymentRecord] = {}
        self.programs: dict[str, ProgramRecord] = {}
        self.lookups: deque[tuple[str, str]] = deque(maxlen=LOOKUP_HISTORY)

    def add_user(self, user: UserRecord) -> UserRecord:
        self.users[str(user.id)] = user
        return user

    def add_booking(self, booking: BookingRecord) -> BookingRecord:
        self.bookings[str(booking.id)] = booking
        return booking

    def add_payment(self, payment: PaymentRecord) -> PaymentRecord:
        self.payments[str(payment.id)] = payment
        return payment

    def add_program(self, program: ProgramRecord) -> ProgramRecord:
        self.programs[str(program.id)] = program
        return program

    def get_user(self, user_id):
        self.lookups.append(("user", str(user_id)))
        return self.users.get(str(user_id))

    def get_booking(self, booking_id):
        self.lookups.append(("booking", str(booking_id)))
        booking = self.bookings.get(str(booking_id))
        if booking is None:
            return None
        return replace(
            booking,
            coach=self.users.get(str(booking.coach_id)) if booking.coach_id else None,
            user=self.users.get(str(booking.user_id)) if booking.user_id else None,
        )

    def get_program(self, program_id):
        self.lookups.append(("program", str(program_id)))
        program = self.programs.get(str(program_id))
        if program is None:
            return None
        return replace(program, coach=self.users.get(str(program.coach_id)) if program.coach_id else None)

    def get_payment(self, payment_id):
        self.lookups.append(("payment", str(payment_id)))
        payment = self.payments.get(str(payment_id))
        if payment is None:
            return None
        booking = self.bookings.get(str(payment.booking_id)) if payment.booking_id else None
        program = self.programs.get(str(payment.program_id)) if payment.program_id else None
        return replace(
            payment,
            booking=self.get_booking(booking.id) if booking else None,
            program=self.get_program(program.id) if program else None,
        )

    def reset(self):
        """Forget all records (useful between tests)."""
        self.users.clear()
        self.bookings.clear()
        self.payments.clear()
        self.programs.clear()
        self.lookups.clear()
