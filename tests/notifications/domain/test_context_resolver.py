"""Tests for context resolution — bookings, payments, programs and context-free types."""

import pytest
from notifications.directory.fake_adapter import LOOKUP_HISTORY, InMemoryDirectory
from notifications.directory.port import BookingRecord, PaymentRecord, ProgramRecord, UserRecord
from notifications.errors import ContextResolutionError
from notifications.notification.context import ContextKind, ContextResolver, NotificationContext

COACH_ID = "65f1a0c2b3d4e5f60718293a"
CLIENT_ID = "65f1a0c2b3d4e5f60718293b"


@pytest.fixture()
def populated_directory():
    d = InMemoryDirectory()
    d.add_user(UserRecord(id=COACH_ID, first_name="Anna", last_name="Keller"))
    d.add_user(UserRecord(id=CLIENT_ID, first_name="Ben", last_name="Meier"))
    d.add_booking(BookingRecord(id="b-1", coach_id=COACH_ID, user_id=CLIENT_ID, status="confirmed"))
    d.add_program(ProgramRecord(id="prog-1", title="Mindful Leadership", coach_id=COACH_ID))
    d.add_payment(PaymentRecord(id="pay-1", payer_id=CLIENT_ID, recipient_id=COACH_ID, booking_id="b-1"))
    return d


@pytest.fixture()
def resolver(populated_directory):
    return ContextResolver(populated_directory)


class TestResolution:
    def test_context_free_type_skips_lookups(self, resolver, populated_directory):
        context = resolver.resolve("welcome", {"bookingId": "b-1"})
        assert context.kind == ContextKind.NONE
        assert list(populated_directory.lookups) == []

    def test_booking_is_populated(self, resolver):
        context = resolver.resolve("booking_confirmed", {"bookingId": "b-1"})
        assert context.kind == ContextKind.BOOKING
        assert context.coach.first_name == "Anna"
        assert context.client.first_name == "Ben"
        assert context.user_id == CLIENT_ID
        assert context.coach_id == COACH_ID

    def test_program(self, resolver):
        context = resolver.resolve("program_purchase_confirmed", {"programId": "prog-1"})
        assert context.kind == ContextKind.PROGRAM
        assert context.coach.first_name == "Anna"

    def test_payment(self, resolver):
        context = resolver.resolve("refund_processed", {"paymentId": "pay-1"})
        assert context.kind == ContextKind.PAYMENT
        assert context.booking.id == "b-1"
        assert context.user_id == CLIENT_ID

    def test_booking_id_may_name_a_payment_for_receipts(self, resolver):
        context = resolver.resolve("payment_received", {"bookingId": "pay-1"})
        assert context.kind == ContextKind.PAYMENT
        assert context.subject_id == "pay-1"

    def test_booking_id_does_not_fall_back_for_other_types(self, resolver):
        with pytest.raises(ContextResolutionError):
            resolver.resolve("booking_confirmed", {"bookingId": "pay-1"})

    def test_booking_wins_over_program(self, resolver):
        context = resolver.resolve("payment_received", {"bookingId": "b-1", "programId": "prog-1"})
        assert context.kind == ContextKind.BOOKING

    def test_no_reference(self, resolver):
        with pytest.raises(ContextResolutionError):
            resolver.resolve("booking_confirmed", {})

    def test_missing_program(self, resolver):
        with pytest.raises(ContextResolutionError):
            resolver.resolve("program_completed", {"programId": "nope"})


class TestSuppliedContext:
    def test_populated_context_is_used_as_is(self, resolver, populated_directory):
        booking = populated_directory.get_booking("b-1")
        populated_directory.lookups.clear()

        context = resolver.resolve("booking_confirmed", {}, booking)

        assert context.booking is booking
        assert list(populated_directory.lookups) == []

    def test_bare_context_is_reloaded(self, resolver):
        bare = BookingRecord(id="b-1", coach_id=COACH_ID, user_id=CLIENT_ID)
        context = resolver.resolve("booking_confirmed", {}, bare)
        assert context.booking.coach is not None

    def test_unsupported_context_type(self):
        with pytest.raises(ContextResolutionError):
            NotificationContext.of({"id": "b-1"})

    def test_summary_of_booking(self, resolver):
        summary = resolver.resolve("booking_confirmed", {"bookingId": "b-1"}).summary()
        assert summary["kind"] == "booking"
        assert summary["booking"]["coach"]["firstName"] == "Anna"

    def test_empty_summary(self):
        assert NotificationContext.empty().summary() is None


class TestInMemoryDirectory:
    def test_lookup_history_is_bounded(self, populated_directory):
        for _ in range(LOOKUP_HISTORY + 10):
            populated_directory.get_user(CLIENT_ID)
        populated_directory.get_booking("b-1")

        assert len(populated_directory.lookups) == LOOKUP_HISTORY
        assert populated_directory.lookups[-1] == ("booking", "b-1")

    def test_booking_lookup_populates_parties(self, populated_directory):
        booking = populated_directory.get_booking("b-1")
        assert booking.coach.first_name == "Anna"
        assert booking.user.first_name == "Ben"
        assert populated_directory.bookings["b-1"].coach is None
