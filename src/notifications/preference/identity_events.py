"""Inbound cross-domain event handler — Preferences reacts to Identity events.

Listens for UserRegistered to create default notification preferences and
send the welcome email.
"""

import structlog
from notifications.domain import notifications
from notifications.errors import NotificationError
from notifications.notification.dispatcher import NotificationDispatcher
from notifications.notification.request import NotificationRequest
from notifications.preference.preference import SUPPORTED_LANGUAGES, NotificationPreference, find_preference
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from shared.events.identity import UserRegistered

logger = structlog.get_logger(__name__)

notifications.register_external_event(UserRegistered, "Identity.UserRegistered.v1")


@notifications.event_handler(part_of=NotificationPreference, stream_category="identity::user")
class PreferenceIdentityEventsHandler:
    """Creates default preferences and welcomes new users."""

    @handle(UserRegistered)
    def on_user_registered(self, event: UserRegistered) -> None:
        user_id = str(event.user_id)

        if find_preference(user_id) is not None:
            logger.info("Preferences already exist for user", user_id=user_id)
        else:
            language = event.language if event.language in SUPPORTED_LANGUAGES else None
            preference = NotificationPreference.create_default(user_id=user_id, language=language)
            current_domain.repository_for(NotificationPreference).add(preference)
            logger.info("Default preferences created for new user", user_id=user_id, preference_id=str(preference.id))

        try:
            NotificationDispatcher().send(
                NotificationRequest(
                    notification_type="welcome",
                    recipient_id=user_id,
                    metadata={"firstName": event.first_name},
                )
            )
        except NotificationError as exc:
            logger.error("Welcome notification failed", user_id=user_id, error=str(exc))
