"""Inbox queries — a recipient's notifications, newest first."""

from notifications.notification.notification import Notification, NotificationStatus
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def list_for_recipient(recipient_id, status=NotificationStatus.ACTIVE.value, is_read=None, page=1, limit=DEFAULT_PAGE_SIZE):
    """One page of a recipient's notifications.

    Returns ``(items, total)``. Deleted notifications are never listed.
    """
    if status == NotificationStatus.DELETED.value:
        raise ValidationError({"status": ["Deleted notifications are not listed"]})
    try:
        NotificationStatus(status)
    except ValueError:
        raise ValidationError({"status": [f"Unknown status: {status}"]}) from None
    if page < 1 or not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValidationError({"page": [f"page must be >= 1 and limit between 1 and {MAX_PAGE_SIZE}"]})

    filters = {"recipient_id": str(recipient_id), "status": status}
    if is_read is not None:
        filters["is_read"] = is_read

    dao = current_domain.repository_for(Notification)._dao
    result = dao.query.filter(**filters).order_by("-created_at").offset((page - 1) * limit).limit(limit).all()
    return result.items, result.total


def unread_count(recipient_id) -> int:
    dao = current_domain.repository_for(Notification)._dao
    return dao.query.filter(
        recipient_id=str(recipient_id),
        status=NotificationStatus.ACTIVE.value,
        is_read=False,
    ).all().total
