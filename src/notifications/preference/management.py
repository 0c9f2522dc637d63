"""Preference management commands + handlers — email toggles and language."""

from notifications.domain import notifications
from notifications.preference.preference import NotificationPreference, find_preference
from protean.fields import Boolean, Dict, Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle


@notifications.command(part_of="NotificationPreference")
class UpdateNotificationPreferences:
    """Update a user's email toggles. Preferences are created on first update."""

    user_id: Identifier(required=True)
    email_enabled: Boolean()
    email_categories: Dict()


@notifications.command(part_of="NotificationPreference")
class SetPreferredLanguage:
    user_id: Identifier(required=True)
    language: String(required=True, max_length=5)


def _load_or_create(user_id):
    return find_preference(user_id) or NotificationPreference.create_default(user_id=str(user_id))


@notifications.command_handler(part_of=NotificationPreference)
class ManagePreferencesHandler:
    @handle(UpdateNotificationPreferences)
    def update_preferences(self, command: UpdateNotificationPreferences):
        repo = current_domain.repository_for(NotificationPreference)
        preference = _load_or_create(command.user_id)
        preference.update_email_preferences(
            email_enabled=command.email_enabled,
            categories=command.email_categories,
        )
        repo.add(preference)
        return preference

    @handle(SetPreferredLanguage)
    def set_language(self, command: SetPreferredLanguage):
        repo = current_domain.repository_for(NotificationPreference)
        preference = _load_or_create(command.user_id)
        preference.set_language(command.language)
        repo.add(preference)
        return preference
