"""FastAPI routes for the Notifications domain.

Thin adapters that translate HTTP requests into domain commands.
No business logic — just schema→command→response translation.
The caller is identified by the ``X-User-Id`` header.
"""

from fastapi import APIRouter, Depends, Header, HTTPException
from notifications.api.schemas import (
    BatchReadRequest,
    BatchStatusRequest,
    ChangeStatusRequest,
    ModifiedResponse,
    NotificationListResponse,
    NotificationResponse,
    PreferencesResponse,
    PurgeTrashRequest,
    PurgeTrashResponse,
    StatusResponse,
    UpdatePreferencesRequest,
)
from notifications.notification.inbox import list_for_recipient, unread_count
from notifications.notification.reading import MarkNotificationRead, MarkNotificationsRead
from notifications.notification.retention import PurgeExpiredTrash
from notifications.notification.status import (
    ChangeNotificationsStatus,
    ChangeNotificationStatus,
    MarkNotificationActioned,
)
from notifications.notification.trash import EmptyTrash
from notifications.preference.management import SetPreferredLanguage, UpdateNotificationPreferences
from notifications.preference.preference import find_preference
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

router = APIRouter(prefix="/notifications", tags=["notifications"])


def caller_id(x_user_id: str = Header(default="")) -> str:
    """The authenticated user, as forwarded by the gateway."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id


def _process(command_cls, **fields):
    """Build and run a command, mapping domain errors to HTTP errors."""
    try:
        return current_domain.process(command_cls(**fields), asynchronous=False)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.messages) from exc
    except ObjectNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Notification not found") from exc


def _to_response(n) -> NotificationResponse:
    return NotificationResponse(
        notification_id=str(n.id),
        notification_type=n.notification_type,
        category=n.category,
        priority=n.priority,
        title=n.title,
        message=n.message,
        data=n.get_data(),
        actions=n.get_actions(),
        status=n.status,
        is_read=bool(n.is_read),
        read_at=n.read_at.isoformat() if n.read_at else None,
        booking_id=n.booking_id,
        program_id=n.program_id,
        payment_id=n.payment_id,
        created_at=n.created_at.isoformat() if n.created_at else None,
    )


# ---------------------------------------------------------------------------
# Inbox
# ---------------------------------------------------------------------------
@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    status: str = "active",
    is_read: bool | None = None,
    page: int = 1,
    limit: int = 20,
    user_id: str = Depends(caller_id),
) -> NotificationListResponse:
    """List the caller's notifications, newest first."""
    try:
        items, total = list_for_recipient(user_id, status=status, is_read=is_read, page=page, limit=limit)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.messages) from exc

    return NotificationListResponse(
        notifications=[_to_response(n) for n in items],
        total=total,
        page=page,
        limit=limit,
        unread_count=unread_count(user_id),
    )


@router.post("/read", response_model=ModifiedResponse)
async def mark_many_read(body: BatchReadRequest, user_id: str = Depends(caller_id)) -> ModifiedResponse:
    """Mark several (or all unread) notifications as read."""
    modified = _process(MarkNotificationsRead, recipient_id=user_id, notification_ids=body.notification_ids or [])
    return ModifiedResponse(modified=modified)


@router.put("/status", response_model=ModifiedResponse)
async def change_many_status(body: BatchStatusRequest, user_id: str = Depends(caller_id)) -> ModifiedResponse:
    """Move several notifications to another status."""
    modified = _process(
        ChangeNotificationsStatus,
        recipient_id=user_id,
        notification_ids=body.notification_ids,
        status=body.status,
    )
    return ModifiedResponse(modified=modified)


@router.delete("/trash", response_model=ModifiedResponse)
async def empty_trash(user_id: str = Depends(caller_id)) -> ModifiedResponse:
    """Delete everything in the caller's trash."""
    modified = _process(EmptyTrash, recipient_id=user_id)
    return ModifiedResponse(modified=modified)


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------
def _preferences_response(user_id, preference) -> PreferencesResponse:
    if preference is None:
        return PreferencesResponse(user_id=user_id, email_enabled=True)
    return PreferencesResponse(
        user_id=str(preference.user_id),
        email_enabled=preference.email_enabled,
        email_categories=preference.get_email_categories(),
        language=preference.language,
    )


@router.get("/preferences", response_model=PreferencesResponse)
async def get_preferences(user_id: str = Depends(caller_id)) -> PreferencesResponse:
    """Get the caller's email preferences (defaults when none were saved)."""
    return _preferences_response(user_id, find_preference(user_id))


@router.put("/preferences", response_model=PreferencesResponse)
async def update_preferences(body: UpdatePreferencesRequest, user_id: str = Depends(caller_id)) -> PreferencesResponse:
    """Update the caller's email toggles and language."""
    if body.email_enabled is None and not body.email_categories and body.language is None:
        raise HTTPException(status_code=400, detail="No preference to update")

    if body.email_enabled is not None or body.email_categories:
        _process(
            UpdateNotificationPreferences,
            user_id=user_id,
            email_enabled=body.email_enabled,
            email_categories=body.email_categories or {},
        )
    if body.language is not None:
        _process(SetPreferredLanguage, user_id=user_id, language=body.language)

    return _preferences_response(user_id, find_preference(user_id))


# ---------------------------------------------------------------------------
# Maintenance — periodic background job endpoints
# ---------------------------------------------------------------------------
@router.post("/maintenance/purge-trash", response_model=PurgeTrashResponse)
async def purge_expired_trash(body: PurgeTrashRequest | None = None) -> PurgeTrashResponse:
    """Delete trash past its retention.

    Designed to be called periodically by an external scheduler (e.g., daily).
    Idempotent: already-deleted notifications are skipped.
    """
    purged = _process(PurgeExpiredTrash, as_of=body.as_of if body else None)
    return PurgeTrashResponse(purged=purged)


# ---------------------------------------------------------------------------
# Single notification
# ---------------------------------------------------------------------------
@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(notification_id: str, user_id: str = Depends(caller_id)) -> NotificationResponse:
    """Mark one notification as read."""
    notification = _process(MarkNotificationRead, notification_id=notification_id, recipient_id=user_id)
    return _to_response(notification)


@router.put("/{notification_id}/status", response_model=NotificationResponse)
async def change_status(
    notification_id: str, body: ChangeStatusRequest, user_id: str = Depends(caller_id)
) -> NotificationResponse:
    """Archive, trash or restore one notification."""
    notification = _process(
        ChangeNotificationStatus,
        notification_id=notification_id,
        recipient_id=user_id,
        status=body.status,
    )
    return _to_response(notification)


@router.put("/{notification_id}/actioned", response_model=NotificationResponse)
async def mark_actioned(notification_id: str, user_id: str = Depends(caller_id)) -> NotificationResponse:
    """Record that the notification's action was taken."""
    notification = _process(MarkNotificationActioned, notification_id=notification_id, recipient_id=user_id)
    return _to_response(notification)

