"""Directory port — read-only view of the marketplace records notifications refer to.

The dispatcher and channels program against this port; the owning services
(users, bookings, payments, programs) provide adapters.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass
class UserRecord:
    id: str
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    language: str | None = None

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def summary(self) -> dict:
        return {
            "id": str(self.id),
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
        }


@dataclass
class BookingRecord:
    id: str
    coach_id: str | None = None
    user_id: str | None = None
    start: datetime | None = None
    end: datetime | None = None
    status: str | None = None
    booking_type: str | None = None
    session_type: str | None = None
    title: str | None = None
    is_webinar: bool = False
    webinar_link: str | None = None
    attendee_count: int | None = None
    max_attendees: int | None = None
    payment_status: str | None = None
    price: float | None = None
    currency: str | None = None
    # Populated associations
    coach: UserRecord | None = None
    user: UserRecord | None = None

    @property
    def duration_minutes(self) -> float | None:
        if self.start is None or self.end is None:
            return None
        return (self.end - self.start).total_seconds() / 60

    def is_populated(self) -> bool:
        """Coach loaded, and the client too when the booking has one."""
        if self.coach is None:
            return False
        return self.user_id is None or self.user is not None


@dataclass
class ProgramRecord:
    id: str
    title: str | None = None
    coach_id: str | None = None
    coach: UserRecord | None = None

    def is_populated(self) -> bool:
        return self.coach_id is None or self.coach is not None


@dataclass
class PaymentRecord:
    id: str
    payer_id: str | None = None
    recipient_id: str | None = None
    booking_id: str | None = None
    program_id: str | None = None
    amount: float | None = None
    currency: str | None = None
    status: str | None = None
    # Populated associations
    booking: BookingRecord | None = None
    program: ProgramRecord | None = None

    def is_populated(self) -> bool:
        if self.booking_id is not None and self.booking is None:
            return False
        if self.program_id is not None and self.program is None:
            return False
        return True


class DirectoryPort(ABC):
    """Abstract interface for directory adapters.

    Lookups return ``None`` for unknown ids. Bookings, payments and
    programs come back with their associations populated.
    """

    @abstractmethod
    def get_user(self, user_id: str) -> UserRecord | None: ...

    @abstractmethod
    def get_booking(self, booking_id: str) -> BookingRecord | None: ...

    @abstractmethod
    def get_payment(self, payment_id: str) -> PaymentRecord | None: ...

    @abstractmethod
    def get_program(self, program_id: str) -> ProgramRecord | None: ...
