"""Pydantic request/response models for the Notifications API.

API schemas are separate from Protean commands (anti-corruption pattern).
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------
class BatchReadRequest(BaseModel):
    notification_ids: list[str] | None = Field(
        default=None,
        description="Notifications to mark read; omit to mark every unread notification",
    )


class ChangeStatusRequest(BaseModel):
    status: str = Field(..., examples=["archived"], description="One of active, archived, trash")


class BatchStatusRequest(BaseModel):
    notification_ids: list[str] = Field(..., min_length=1)
    status: str = Field(..., examples=["trash"])


class UpdatePreferencesRequest(BaseModel):
    email_enabled: bool | None = None
    email_categories: dict[str, bool] | None = Field(default=None, examples=[{"payment": False}])
    language: str | None = Field(default=None, examples=["en"])


class PurgeTrashRequest(BaseModel):
    as_of: datetime | None = None


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class ModifiedResponse(BaseModel):
    status: str = "ok"
    modified: int


class NotificationResponse(BaseModel):
    notification_id: str
    notification_type: str
    category: str
    priority: str
    title: str
    message: str
    data: dict = {}
    actions: list[dict] = []
    status: str
    is_read: bool
    read_at: str | None = None
    booking_id: str | None = None
    program_id: str | None = None
    payment_id: str | None = None
    created_at: str | None = None


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    total: int
    page: int
    limit: int
    unread_count: int


class PreferencesResponse(BaseModel):
    user_id: str
    email_enabled: bool
    email_categories: dict[str, bool] = {}
    language: str | None = None


class PurgeTrashResponse(BaseModel):
    status: str = "ok"
    purged: int
