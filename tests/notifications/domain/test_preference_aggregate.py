"""Tests for the NotificationPreference aggregate."""

import pytest
from notifications.preference.events import (
    CategoryEmailToggled,
    EmailToggled,
    LanguageChanged,
    PreferencesCreated,
)
from notifications.preference.preference import NotificationPreference
from protean.exceptions import ValidationError

USER_ID = "65f1a0c2b3d4e5f60718293b"


def _make_preference(**overrides):
    pref = NotificationPreference.create_default(user_id=USER_ID, **overrides)
    pref._events.clear()
    return pref


class TestDefaults:
    def test_email_on_for_everything(self):
        pref = NotificationPreference.create_default(user_id=USER_ID)
        assert pref.email_enabled is True
        assert pref.get_email_categories() == {}
        assert pref.language is None
        assert pref.allows_email("booking") is True
        assert isinstance(pref._events[-1], PreferencesCreated)

    def test_language_at_creation(self):
        assert _make_preference(language="fr").language == "fr"

    def test_unsupported_language_at_creation(self):
        with pytest.raises(ValidationError):
            NotificationPreference.create_default(user_id=USER_ID, language="xx")


class TestEmailToggles:
    def test_master_toggle_off_blocks_every_category(self):
        pref = _make_preference()
        pref.set_email_enabled(False)
        assert pref.allows_email("booking") is False
        assert pref.allows_email(None) is False
        assert isinstance(pref._events[-1], EmailToggled)

    def test_category_toggle(self):
        pref = _make_preference()
        pref.set_category_email("payment", False)
        assert pref.is_category_email_enabled("payment") is False
        assert pref.allows_email("payment") is False
        assert pref.allows_email("booking") is True
        assert isinstance(pref._events[-1], CategoryEmailToggled)

    def test_unknown_category(self):
        pref = _make_preference()
        with pytest.raises(ValidationError):
            pref.set_category_email("newsletter", False)

    def test_update_applies_master_and_categories(self):
        pref = _make_preference()
        pref.update_email_preferences(email_enabled=True, categories={"review": False, "booking": True})
        assert pref.get_email_categories() == {"review": False, "booking": True}

    def test_update_is_all_or_nothing(self):
        pref = _make_preference()
        with pytest.raises(ValidationError):
            pref.update_email_preferences(categories={"review": False, "newsletter": False})
        assert pref.get_email_categories() == {}

    def test_update_needs_something(self):
        pref = _make_preference()
        with pytest.raises(ValidationError):
            pref.update_email_preferences()


class TestLanguage:
    def test_set_language(self):
        pref = _make_preference()
        pref.set_language("en")
        assert pref.language == "en"
        assert isinstance(pref._events[-1], LanguageChanged)

    def test_unsupported_language(self):
        pref = _make_preference()
        with pytest.raises(ValidationError):
            pref.set_language("klingon")
