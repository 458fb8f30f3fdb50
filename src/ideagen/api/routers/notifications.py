"""
Notifications router: a user's in-app inbox.

GET    /users/{user_id}/notifications
POST   /users/{user_id}/notifications/{notification_id}/read
DELETE /users/{user_id}/notifications/{notification_id}
DELETE /users/{user_id}/notifications
"""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Path, Query

from ideagen.api.deps import OpContext
from ideagen.api.errors import handle_error
from ideagen.api.schemas import NotificationListSchema, NotificationSchema, SuccessResponse
from ideagen.ops.requests import NotificationRequest

router = APIRouter(prefix="/users/{user_id}/notifications")


@router.get("", response_model=SuccessResponse[NotificationListSchema])
def list_notifications(
    ctx: OpContext,
    user_id: str = Path(..., description="User ID"),
    limit: int = Query(50, ge=1, le=500),
    unread_only: bool = Query(False),
):
    """Latest notifications, newest first, with the unread count."""
    from ideagen.ops.notifications import list_notifications as _list
    from ideagen.ops.requests import ListNotificationsRequest

    result = _list(ctx, ListNotificationsRequest(user_id=user_id, limit=limit, unread_only=unread_only))
    if not result.success:
        return handle_error(result)
    inbox = result.data
    return SuccessResponse(
        data=NotificationListSchema(
            items=[NotificationSchema(**asdict(n)) for n in inbox.items],
            unread=inbox.unread,
        ),
        elapsed_ms=result.elapsed_ms,
    )


@router.post("/{notification_id}/read", response_model=SuccessResponse[dict])
def mark_read(
    ctx: OpContext,
    user_id: str = Path(..., description="User ID"),
    notification_id: str = Path(..., description="Notification ID"),
):
    from ideagen.ops.notifications import mark_notification_read

    result = mark_notification_read(
        ctx, NotificationRequest(user_id=user_id, notification_id=notification_id)
    )
    if not result.success:
        return handle_error(result)
    return SuccessResponse(data=result.data, elapsed_ms=result.elapsed_ms)


@router.delete("/{notification_id}", response_model=SuccessResponse[dict])
def delete_notification(
    ctx: OpContext,
    user_id: str = Path(..., description="User ID"),
    notification_id: str = Path(..., description="Notification ID"),
):
    from ideagen.ops.notifications import delete_notification as _delete

    result = _delete(ctx, NotificationRequest(user_id=user_id, notification_id=notification_id))
    if not result.success:
        return handle_error(result)
    return SuccessResponse(data=result.data, elapsed_ms=result.elapsed_ms)


@router.delete("", response_model=SuccessResponse[dict])
def clear_notifications(ctx: OpContext, user_id: str = Path(..., description="User ID")):
    """Delete every notification of the user; returns how many were removed."""
    from ideagen.ops.notifications import clear_notifications as _clear

    result = _clear(ctx, user_id)
    if not result.success:
        return handle_error(result)
    return SuccessResponse(data={"deleted": result.data.deleted}, elapsed_ms=result.elapsed_ms)
