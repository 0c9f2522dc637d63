"""Shared BDD fixtures and step definitions for the Notifications domain."""

import pytest
from notifications.notification.events import (
    NotificationActioned,
    NotificationArchived,
    NotificationCreated,
    NotificationDeleted,
    NotificationRead,
    NotificationRestored,
    NotificationTrashed,
)
from notifications.notification.notification import Notification
from notifications.preference.events import CategoryEmailToggled, EmailToggled, LanguageChanged
from notifications.preference.preference import NotificationPreference
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

_NOTIFICATION_EVENT_CLASSES = {
    "NotificationCreated": NotificationCreated,
    "NotificationArchived": NotificationArchived,
    "NotificationTrashed": NotificationTrashed,
    "NotificationRestored": NotificationRestored,
    "NotificationDeleted": NotificationDeleted,
    "NotificationActioned": NotificationActioned,
    "NotificationRead": NotificationRead,
}

_PREFERENCE_EVENT_CLASSES = {
    "EmailToggled": EmailToggled,
    "CategoryEmailToggled": CategoryEmailToggled,
    "LanguageChanged": LanguageChanged,
}


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


def _notification(recipient_id):
    n = Notification.create(
        recipient_id=recipient_id,
        notification_type="booking_reminder",
        title="notifications:booking_reminder.title",
        message="notifications:booking_reminder.message",
    )
    n._events.clear()
    return n


# ---------------------------------------------------------------------------
# Given steps — notifications
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a new notification for recipient "{recipient_id}"'),
    target_fixture="notification",
)
def new_notification(recipient_id):
    return Notification.create(
        recipient_id=recipient_id,
        notification_type="booking_reminder",
        title="notifications:booking_reminder.title",
        message="notifications:booking_reminder.message",
    )


@given("an active notification", target_fixture="notification")
def active_notification():
    return _notification("65f1a0c2b3d4e5f60718293b")


@given("an archived notification", target_fixture="notification")
def archived_notification():
    n = _notification("65f1a0c2b3d4e5f60718293b")
    n.archive()
    n._events.clear()
    return n


@given("a trashed notification", target_fixture="notification")
def trashed_notification():
    n = _notification("65f1a0c2b3d4e5f60718293b")
    n.move_to_trash()
    n._events.clear()
    return n


# ---------------------------------------------------------------------------
# Given steps — preferences
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a new user "{user_id}"'),
    target_fixture="user_id",
)
def new_user(user_id):
    return user_id


@given("a user with default preferences", target_fixture="preference")
def user_with_default_prefs():
    pref = NotificationPreference.create_default(user_id="65f1a0c2b3d4e5f6071829b1")
    pref._events.clear()
    return pref


# ---------------------------------------------------------------------------
# Then steps — notification status & events
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the notification status is "{status}"'))
def notification_status_is(notification, status):
    assert notification.status == status


@then("the notification is unread")
def notification_unread(notification):
    assert notification.is_read is False
    assert notification.read_at is None


@then("the notification is read")
def notification_read(notification):
    assert notification.is_read is True
    assert notification.read_at is not None


@then(parsers.cfparse("a {event_type} event is raised"))
def notification_event_raised(notification, event_type):
    event_cls = _NOTIFICATION_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in notification._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in notification._events]}"


@then("no event is raised")
def no_event_raised(notification):
    assert notification._events == []


@then("the change is rejected")
def change_rejected(error):
    assert isinstance(error["exc"], ValidationError)


# ---------------------------------------------------------------------------
# Then steps — preferences
# ---------------------------------------------------------------------------
@then("email is enabled")
def email_enabled(preference):
    assert preference.email_enabled is True


@then("email is disabled")
def email_disabled(preference):
    assert preference.email_enabled is False


@then(parsers.cfparse('"{category}" emails are allowed'))
def category_allowed(preference, category):
    assert preference.allows_email(category) is True


@then(parsers.cfparse('"{category}" emails are suppressed'))
def category_suppressed(preference, category):
    assert preference.allows_email(category) is False


@then(parsers.cfparse('the preferred language is "{language}"'))
def language_is(preference, language):
    assert preference.language == language


@then(parsers.cfparse("the preferences raise a {event_type} event"))
def preference_event_raised(preference, event_type):
    event_cls = _PREFERENCE_EVENT_CLASSES[event_type]
    assert any(isinstance(e, event_cls) for e in preference._events)
