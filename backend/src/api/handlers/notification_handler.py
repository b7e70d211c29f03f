"""
Notification Handler

    GET /notifications?limit=&offset=&unread=    newest first + unread count
    PUT /notifications                           mark read (ids or all)
"""

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import CurrentUser
from src.api.dependencies.services import get_notification_service
from src.shared.schemas.notification import (
    MarkReadRequest,
    MarkReadResponse,
    NotificationListResponse,
    NotificationResponse,
)
from src.shared.services.notification_service import NotificationService


router = APIRouter()


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    current_user: CurrentUser,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    unread: bool = Query(False, description="Only unread notifications"),
    notification_service: NotificationService = Depends(get_notification_service),
):
    user_id = current_user["user_id"]
    notifications = await notification_service.list_notifications(
        user_id, limit=limit, offset=offset, unread_only=unread
    )
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        unread_count=await notification_service.unread_count(user_id),
    )


@router.put("", response_model=MarkReadResponse)
async def mark_read(
    request: MarkReadRequest,
    current_user: CurrentUser,
    notification_service: NotificationService = Depends(get_notification_service),
):
    """Mark the given notifications (or all of them) read. Only the caller's own."""
    user_id = current_user["user_id"]
    if request.mark_all_as_read:
        updated = await notification_service.mark_all_read(user_id)
    else:
        updated = await notification_service.mark_read(user_id, request.notification_ids)
    return MarkReadResponse(
        updated=updated,
        unread_count=await notification_service.unread_count(user_id),
    )
