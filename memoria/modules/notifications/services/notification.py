from typing import List, Optional
from sqlalchemy.orm import Session

from memoria.core.exceptions import ForbiddenError, NotFoundError
from memoria.modules.notifications.models.notification import Notification
from memoria.modules.notifications.schemas.notification import NotificationCreate

def get_notification(db: Session, notification_id: str) -> Optional[Notification]:
    """Get notification by ID"""
    return db.query(Notification).filter(Notification.id == notification_id).first()

def get_owned_notification(db: Session, notification_id: str, user_id: str) -> Notification:
    """Get a notification that belongs to user_id"""
    notification = get_notification(db, notification_id)
    if not notification:
        raise NotFoundError("Notification not found")
    if notification.user_id != user_id:
        raise ForbiddenError("Not enough permissions")
    return notification

def get_user_notifications(db: Session, user_id: str, skip: int = 0, limit: int = 50, unread_only: bool = False) -> List[Notification]:
    """Get notifications for a user, newest first"""
    query = db.query(Notification).filter(Notification.user_id == user_id)

    if unread_only:
        query = query.filter(Notification.read == False)  # noqa: E712

    return query.order_by(Notification.created_at.desc()).offset(skip).limit(limit).all()

def count_unread(db: Session, user_id: str) -> int:
    return db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.read == False,  # noqa: E712
    ).count()

def create_notification(db: Session, notification_in: NotificationCreate, commit: bool = True) -> Notification:
    """Create a new notification"""
    notification = Notification(**notification_in.model_dump())

    db.add(notification)
    if commit:
        db.commit()
        db.refresh(notification)
    else:
        db.flush()

    return notification

def delete_request_notification(db: Session, type: str, recipient_id: str, related_id: str) -> int:
    """Remove the pending-request notification tied to a friendship or follow; the caller commits"""
    return db.query(Notification).filter(
        Notification.type == type,
        Notification.user_id == recipient_id,
        Notification.related_id == related_id,
    ).delete(synchronize_session=False)

def mark_as_read(db: Session, notification: Notification) -> Notification:
    """Mark a notification as read"""
    notification.read = True

    db.add(notification)
    db.commit()
    db.refresh(notification)

    return notification

def mark_all_as_read(db: Session, user_id: str) -> int:
    """Mark all notifications as read for a user"""
    result = db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.read == False,  # noqa: E712
    ).update({"read": True}, synchronize_session=False)

    db.commit()

    return result

def delete_notification(db: Session, notification: Notification) -> None:
    """Delete a notification"""
    db.delete(notification)
    db.commit()

def delete_all_notifications(db: Session, user_id: str) -> int:
    """Delete all notifications for a user"""
    result = db.query(Notification).filter(Notification.user_id == user_id).delete(synchronize_session=False)
    db.commit()

    return result
