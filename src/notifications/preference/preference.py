"""NotificationPreference aggregate — a user's email preferences.

Holds the master email toggle, per-category email toggles and the preferred
language for emails. In-app delivery is not preference-controlled. Default
preferences are created when a user registers.
"""

import json
from datetime import UTC, datetime

from notifications.domain import notifications
from notifications.notification.types import NotificationCategory
from notifications.preference.events import (
    CategoryEmailToggled,
    EmailToggled,
    LanguageChanged,
    PreferencesCreated,
)
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String, Text
from protean.utils.globals import current_domain

SUPPORTED_LANGUAGES = ("de", "en", "fr", "it")


def _validate_category(category):
    try:
        return NotificationCategory(category).value
    except ValueError:
        raise ValidationError({"email_categories": [f"Unknown notification category: {category}"]}) from None


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@notifications.aggregate
class NotificationPreference:
    """Email preferences of one user."""

    user_id: Identifier(required=True, unique=True)

    # Master toggle, then category toggles
    email_enabled: Boolean(default=True)
    email_categories: Text()  # JSON {category: bool}; missing means enabled

    language: String(max_length=5)

    # Timestamps
    created_at: DateTime()
    updated_at: DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create_default(cls, user_id, language=None):
        """Email on for every category; language left to the user profile."""
        if language is not None and language not in SUPPORTED_LANGUAGES:
            raise ValidationError({"language": [f"Unsupported language: {language}"]})

        now = datetime.now(UTC)

        preference = cls(
            user_id=user_id,
            email_enabled=True,
            email_categories=json.dumps({}),
            language=language,
            created_at=now,
            updated_at=now,
        )

        preference.raise_(
            PreferencesCreated(
                preference_id=str(preference.id),
                user_id=str(user_id),
                email_enabled=True,
                language=language,
                created_at=now,
            )
        )

        return preference

    def get_email_categories(self) -> dict:
        return json.loads(self.email_categories) if self.email_categories else {}

    # -------------------------------------------------------------------
    # Email toggles
    # -------------------------------------------------------------------
    def set_email_enabled(self, enabled):
        now = datetime.now(UTC)
        self.email_enabled = bool(enabled)
        self.updated_at = now

        self.raise_(
            EmailToggled(
                preference_id=str(self.id),
                user_id=str(self.user_id),
                email_enabled=self.email_enabled,
                updated_at=now,
            )
        )

    def set_category_email(self, category, enabled):
        category = _validate_category(category)
        categories = self.get_email_categories()
        categories[category] = bool(enabled)

        now = datetime.now(UTC)
        self.email_categories = json.dumps(categories)
        self.updated_at = now

        self.raise_(
            CategoryEmailToggled(
                preference_id=str(self.id),
                user_id=str(self.user_id),
                category=category,
                enabled=bool(enabled),
                updated_at=now,
            )
        )

    def update_email_preferences(self, email_enabled=None, categories=None):
        """Apply the master toggle and any category toggles. None keeps a value."""
        if email_enabled is None and not categories:
            raise ValidationError({"email": ["At least one email preference must be provided"]})

        # Validate every category before changing anything
        for category in categories or {}:
            _validate_category(category)

        if email_enabled is not None:
            self.set_email_enabled(email_enabled)
        for category, enabled in (categories or {}).items():
            self.set_category_email(category, enabled)

    def set_language(self, language):
        if language not in SUPPORTED_LANGUAGES:
            raise ValidationError({"language": [f"Unsupported language: {language}"]})

        now = datetime.now(UTC)
        self.language = language
        self.updated_at = now

        self.raise_(
            LanguageChanged(
                preference_id=str(self.id),
                user_id=str(self.user_id),
                language=language,
                updated_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Query helpers
    # -------------------------------------------------------------------
    def is_category_email_enabled(self, category):
        return self.get_email_categories().get(category, True) is not False

    def allows_email(self, category):
        """Master toggle first, then the category toggle."""
        if not self.email_enabled:
            return False
        return category is None or self.is_category_email_enabled(category)


def find_preference(user_id):
    """The user's preferences, or None when none were created yet."""
    repo = current_domain.repository_for(NotificationPreference)
    prefs = repo._dao.query.filter(user_id=str(user_id)).all().items
    return prefs[0] if prefs else None
