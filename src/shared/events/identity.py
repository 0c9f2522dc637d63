"""Cross-domain event contracts for Identity domain events.

Registered as external events in the notifications domain with matching
__type__ strings.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Identifier, String


class UserRegistered(BaseEvent):
    """A new user (client or coach) signed up."""

    __version__ = 1

    user_id = Identifier(required=True)
    email = String(required=True, max_length=254)
    first_name = String(max_length=100)
    last_name = String(max_length=100)
    role = String(max_length=20)
    language = String(max_length=5)
    registered_at = DateTime(required=True)
