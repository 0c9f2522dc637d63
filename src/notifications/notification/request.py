"""NotificationRequest — what a producer asks the dispatcher to send."""

from dataclasses import dataclass, field

from notifications.notification.types import NotificationTypeSpec, lookup

# Accepted keys when a request is given as a plain dict
_DICT_KEYS = {
    "type": "notification_type",
    "recipient": "recipient_id",
    "sender": "sender_id",
    "category": "category",
    "priority": "priority",
    "channels": "channels",
    "requiresAction": "requires_action",
    "actions": "actions",
    "metadata": "metadata",
    "recipientRole": "recipient_role",
    "subType": "sub_type",
    "groupId": "group_id",
    "groupOrder": "group_order",
}


@dataclass
class NotificationRequest:
    notification_type: str
    recipient_id: str | None = None
    sender_id: str | None = None
    category: str | None = None
    priority: str | None = None
    channels: tuple[str, ...] | None = None
    requires_action: bool | None = None
    actions: tuple[str, ...] | None = None
    metadata: dict = field(default_factory=dict)
    recipient_role: str | None = None
    sub_type: str | None = None
    group_id: str | None = None
    group_order: int | None = None

    @classmethod
    def from_dict(cls, config: dict) -> "NotificationRequest":
        """Build a request from a camelCase (``type``, ``recipient``...) or snake_case dict."""
        values = {}
        for key, value in config.items():
            name = _DICT_KEYS.get(key, key)
            if name in cls.__dataclass_fields__:
                values[name] = value
        for name in ("channels", "actions"):
            if values.get(name) is not None:
                values[name] = tuple(values[name])
        values["metadata"] = dict(values.get("metadata") or {})
        return cls(**values)

    @property
    def type_spec(self) -> NotificationTypeSpec:
        return lookup(self.notification_type)

    def resolved_channels(self) -> tuple[str, ...]:
        return tuple(self.channels) if self.channels else self.type_spec.default_channels

    def valid_actions(self) -> list[str]:
        """Per-request action verbs override the registry defaults."""
        if self.actions is not None:
            return list(self.actions)
        return list(self.type_spec.valid_actions)

    def needs_action(self) -> bool:
        if self.requires_action is not None:
            return bool(self.requires_action)
        return self.type_spec.requires_action
