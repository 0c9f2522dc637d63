"""Domain events for the NotificationPreference aggregate."""

from notifications.domain import notifications
from protean.fields import Boolean, DateTime, Identifier, String


@notifications.event(part_of="NotificationPreference")
class PreferencesCreated:
    """Default notification preferences were created for a user."""

    __version__ = 1

    preference_id: Identifier(required=True)
    user_id: Identifier(required=True)
    email_enabled: Boolean(required=True)
    language: String(max_length=5)
    created_at: DateTime(required=True)


@notifications.event(part_of="NotificationPreference")
class EmailToggled:
    """A user switched all notification emails on or off."""

    __version__ = 1

    preference_id: Identifier(required=True)
    user_id: Identifier(required=True)
    email_enabled: Boolean(required=True)
    updated_at: DateTime(required=True)


@notifications.event(part_of="NotificationPreference")
class CategoryEmailToggled:
    """A user switched emails for one notification category on or off."""

    __version__ = 1

    preference_id: Identifier(required=True)
    user_id: Identifier(required=True)
    category: String(required=True, max_length=50)
    enabled: Boolean(required=True)
    updated_at: DateTime(required=True)


@notifications.event(part_of="NotificationPreference")
class LanguageChanged:
    """A user picked the language their emails are written in."""

    __version__ = 1

    preference_id: Identifier(required=True)
    user_id: Identifier(required=True)
    language: String(required=True, max_length=5)
    updated_at: DateTime(required=True)
