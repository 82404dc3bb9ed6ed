from typing import Any, List

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from memoria.db.session import get_db
from memoria.deps import get_current_user
from memoria.modules.user_management.models.user import User
from memoria.modules.notifications.schemas.notification import (
    BulkResult,
    Notification as NotificationSchema,
    UnreadCount,
)
from memoria.modules.notifications.services.notification import (
    count_unread,
    delete_all_notifications,
    delete_notification,
    get_owned_notification,
    get_user_notifications,
    mark_all_as_read,
    mark_as_read,
)

router = APIRouter()

@router.get("/me", response_model=List[NotificationSchema])
def read_my_notifications(
    db: Session = Depends(get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    unread_only: bool = False,
    current_user: User = Depends(get_current_user),
) -> Any:
    """Get user's notifications, newest first"""
    return get_user_notifications(db, current_user.id, skip, limit, unread_only)

@router.get("/me/unread-count", response_model=UnreadCount)
def read_unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return UnreadCount(count=count_unread(db, current_user.id))

@router.put("/mark-all-read", response_model=BulkResult)
def mark_all_notifications_as_read(
    *,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Mark all of the user's notifications as read"""
    count = mark_all_as_read(db, current_user.id)

    return BulkResult(message=f"Marked {count} notifications as read", count=count)

@router.put("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def mark_notification_as_read(
    *,
    db: Session = Depends(get_db),
    notification_id: str,
    current_user: User = Depends(get_current_user),
) -> Response:
    """Mark a specific notification as read"""
    notification = get_owned_notification(db, notification_id, current_user.id)
    mark_as_read(db, notification)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.delete("/me", response_model=BulkResult)
def delete_all_user_notifications(
    *,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Delete all notifications for the current user"""
    count = delete_all_notifications(db, current_user.id)

    return BulkResult(message=f"Deleted {count} notifications", count=count)

@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification_by_id(
    *,
    db: Session = Depends(get_db),
    notification_id: str,
    current_user: User = Depends(get_current_user),
) -> Response:
    """Delete a specific notification"""
    notification = get_owned_notification(db, notification_id, current_user.id)
    delete_notification(db, notification)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
