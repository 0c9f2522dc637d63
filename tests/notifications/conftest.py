from datetime import UTC, datetime, timedelta

import pytest
from notifications.channel import get_email_queue, get_realtime_notifier
from notifications.directory import get_directory
from notifications.directory.port import BookingRecord, PaymentRecord, ProgramRecord, UserRecord
from protean.integrations.pytest import DomainFixture

COACH_ID = "65f1a0c2b3d4e5f60718293a"
CLIENT_ID = "65f1a0c2b3d4e5f60718293b"
BOOKING_ID = "65f1a0c2b3d4e5f60718293c"
PAYMENT_ID = "65f1a0c2b3d4e5f60718293d"
PROGRAM_ID = "65f1a0c2b3d4e5f60718293e"


@pytest.fixture(scope="session")
def notifications_bed():
    from notifications.domain import notifications

    bed = DomainFixture(notifications)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(notifications_bed):
    with notifications_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Fake adapters
# ---------------------------------------------------------------------------
@pytest.fixture()
def directory():
    return get_directory()


@pytest.fixture()
def realtime():
    return get_realtime_notifier()


@pytest.fixture()
def email_queue():
    return get_email_queue()


# ---------------------------------------------------------------------------
# Marketplace records
# ---------------------------------------------------------------------------
@pytest.fixture()
def coach(directory):
    return directory.add_user(
        UserRecord(id=COACH_ID, first_name="Anna", last_name="Keller", email="anna@example.com", language="en")
    )


@pytest.fixture()
def client(directory):
    return directory.add_user(
        UserRecord(id=CLIENT_ID, first_name="Ben", last_name="Meier", email="ben@example.com")
    )


@pytest.fixture()
def booking(directory, coach, client):
    start = datetime(2026, 11, 3, 9, 0, tzinfo=UTC)
    return directory.add_booking(
        BookingRecord(
            id=BOOKING_ID,
            coach_id=COACH_ID,
            user_id=CLIENT_ID,
            start=start,
            end=start + timedelta(minutes=60),
            status="confirmed",
            booking_type="one_on_one",
            session_type="Career Coaching",
            payment_status="completed",
            price=120.0,
            currency="CHF",
        )
    )


@pytest.fixture()
def program(directory, coach):
    return directory.add_program(ProgramRecord(id=PROGRAM_ID, title="Mindful Leadership", coach_id=COACH_ID))


@pytest.fixture()
def payment(directory, booking):
    return directory.add_payment(
        PaymentRecord(
            id=PAYMENT_ID,
            payer_id=CLIENT_ID,
            recipient_id=COACH_ID,
            booking_id=BOOKING_ID,
            amount=120.0,
            currency="CHF",
            status="completed",
        )
    )
