"""
Notification Schemas
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from src.shared.models.enums import NotificationType
from src.shared.schemas.common import CamelSchema


class NotificationResponse(CamelSchema):
    id: UUID
    type: NotificationType
    title: str
    message: str
    action_url: Optional[str] = None
    is_read: bool
    created_at: datetime


class NotificationListResponse(CamelSchema):
    notifications: list[NotificationResponse]
    unread_count: int


class MarkReadRequest(CamelSchema):
    """Mark the given notifications read, or all of them with mark_all_as_read."""

    notification_ids: list[UUID] = Field(default_factory=list)
    mark_all_as_read: bool = False


class MarkReadResponse(CamelSchema):
    updated: int
    unread_count: int
