"""Query helpers over the Notification repository."""

from notifications.notification.notification import Notification
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

BATCH_SIZE = 100


def iter_all(batch_size=BATCH_SIZE, order_by="-created_at", **filters):
    """Yield every notification matching ``filters``, one page at a time.

    Rows are collected before yielding so callers may modify and save them
    without shifting the pages still to be read.
    """
    dao = current_domain.repository_for(Notification)._dao
    found = []
    offset = 0
    while True:
        page = dao.query.filter(**filters).order_by(order_by).offset(offset).limit(batch_size).all().items
        found.extend(page)
        if len(page) < batch_size:
            break
        offset += batch_size
    yield from found


def load_owned(notification_id, recipient_id):
    """Load a notification that must belong to ``recipient_id``.

    A foreign notification is reported as missing.
    """
    repo = current_domain.repository_for(Notification)
    notification = repo.get(notification_id)
    if str(notification.recipient_id) != str(recipient_id):
        raise ObjectNotFoundError(f"Notification {notification_id} does not exist")
    return notification
