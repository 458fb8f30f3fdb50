"""
Notification inbox operations.

List, mark as read, delete and clear a user's in-app notifications.
"""

from __future__ import annotations

from ideagen.core.errors import PersistenceError
from ideagen.core.logging import get_logger
from ideagen.notifications.store import NotificationRepository
from ideagen.ops.context import OperationContext
from ideagen.ops.requests import ListNotificationsRequest, NotificationRequest
from ideagen.ops.responses import NotificationList, NotificationsCleared
from ideagen.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


def _repo(ctx: OperationContext) -> NotificationRepository:
    return NotificationRepository(ctx.conn)


def list_notifications(
    ctx: OperationContext,
    request: ListNotificationsRequest,
) -> OperationResult[NotificationList]:
    """Latest notifications of a user, newest first."""
    timer = start_timer()

    if not request.user_id:
        return OperationResult.fail(
            "VALIDATION_FAILED", "user_id is required", elapsed_ms=timer.elapsed_ms
        )
    if request.limit < 1:
        return OperationResult.fail(
            "VALIDATION_FAILED", "limit must be positive", elapsed_ms=timer.elapsed_ms
        )

    try:
        repo = _repo(ctx)
        items = repo.list_for_user(request.user_id, request.limit, request.unread_only)
        unread = repo.count_unread(request.user_id)
    except PersistenceError as e:
        return OperationResult.from_error(e, elapsed_ms=timer.elapsed_ms)

    return OperationResult.ok(NotificationList(items=items, unread=unread), elapsed_ms=timer.elapsed_ms)


def mark_notification_read(
    ctx: OperationContext,
    request: NotificationRequest,
) -> OperationResult[dict]:
    timer = start_timer()

    try:
        updated = _repo(ctx).mark_read(request.user_id, request.notification_id)
    except PersistenceError as e:
        return OperationResult.from_error(e, elapsed_ms=timer.elapsed_ms)

    if not updated:
        return OperationResult.fail(
            "NOT_FOUND",
            f"Notification '{request.notification_id}' not found",
            elapsed_ms=timer.elapsed_ms,
        )
    return OperationResult.ok({"id": request.notification_id, "read": True}, elapsed_ms=timer.elapsed_ms)


def delete_notification(
    ctx: OperationContext,
    request: NotificationRequest,
) -> OperationResult[dict]:
    timer = start_timer()

    try:
        deleted = _repo(ctx).delete(request.user_id, request.notification_id)
    except PersistenceError as e:
        return OperationResult.from_error(e, elapsed_ms=timer.elapsed_ms)

    if not deleted:
        return OperationResult.fail(
            "NOT_FOUND",
            f"Notification '{request.notification_id}' not found",
            elapsed_ms=timer.elapsed_ms,
        )
    return OperationResult.ok({"id": request.notification_id, "deleted": True}, elapsed_ms=timer.elapsed_ms)


def clear_notifications(
    ctx: OperationContext,
    user_id: str,
) -> OperationResult[NotificationsCleared]:
    """Delete every notification of the user."""
    timer = start_timer()

    if not user_id:
        return OperationResult.fail(
            "VALIDATION_FAILED", "user_id is required", elapsed_ms=timer.elapsed_ms
        )

    try:
        count = _repo(ctx).clear_all(user_id)
    except PersistenceError as e:
        return OperationResult.from_error(e, elapsed_ms=timer.elapsed_ms)

    logger.info("notifications_cleared", user_id=user_id, count=count)
    return OperationResult.ok(NotificationsCleared(deleted=count), elapsed_ms=timer.elapsed_ms)
