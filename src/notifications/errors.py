"""Exception taxonomy for notification dispatch.

Fatal errors abort ``NotificationDispatcher.send`` and surface to the caller.
``ChannelDeliveryError`` is raised by channel handlers and swallowed by the
dispatcher's fan-out. Schema violations use Protean's ``ValidationError``.
"""

from protean.exceptions import ValidationError

__all__ = [
    "ChannelDeliveryError",
    "ConfigurationError",
    "ContentGenerationError",
    "ContextResolutionError",
    "NotificationError",
    "ValidationError",
]


class NotificationError(Exception):
    """Base class for notification dispatch failures."""


class ConfigurationError(NotificationError):
    """The request cannot be delivered to anyone (missing or invalid recipient)."""


class ContextResolutionError(NotificationError):
    """The entity a notification is about could not be resolved."""


class ContentGenerationError(NotificationError):
    """The resolved context lacks fields the content template needs."""


class ChannelDeliveryError(NotificationError):
    """A single channel failed to deliver. Never fatal to ``send``."""

    def __init__(self, channel: str, message: str):
        super().__init__(message)
        self.channel = channel
