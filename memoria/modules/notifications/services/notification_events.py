"""
Notification events service.
This module builds the notifications emitted by relationship changes:
friend requests, accepted friend requests, follows and follow requests.

Each notification snapshots the sender's display fields at creation time,
so later profile edits do not rewrite a user's notification history.
"""
from typing import Optional
from sqlalchemy.orm import Session
import logging

from memoria.modules.notifications.models.notification import Notification, NotificationType
from memoria.modules.notifications.schemas.notification import NotificationCreate
from memoria.modules.notifications.services.notification import create_notification
from memoria.modules.user_management.services.user import get_user

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "Unknown"
UNKNOWN_USERNAME = "unknown"

NOTIFICATION_TEXT = {
    NotificationType.FRIEND_REQUEST: "{name} sent you a friend request",
    NotificationType.FRIEND_REQUEST_ACCEPTED: "{name} accepted your friend request",
    NotificationType.FOLLOW: "{name} started following you",
    NotificationType.FOLLOW_REQUEST: "{name} requested to follow you",
}

def create_relationship_notification(
    db: Session,
    type: str,
    recipient_id: str,
    sender_id: str,
    related_id: Optional[str] = None,
    commit: bool = True,
) -> Notification:
    """
    Create a notification for a relationship event.

    Args:
        db: Database session
        type: One of the NotificationType relationship tags
        recipient_id: ID of the user who receives the notification
        sender_id: ID of the user whose action triggered it
        related_id: ID of the friendship or follow the notification refers to
        commit: Commit immediately, or only flush when part of a larger operation

    Returns:
        The persisted notification
    """
    sender = get_user(db, sender_id)
    if not sender:
        logger.warning(f"User {sender_id} not found when creating {type} notification")

    full_name = (sender.full_name if sender else "") or UNKNOWN_NAME
    username = (sender.username if sender else "") or UNKNOWN_USERNAME
    template = NOTIFICATION_TEXT.get(type, "{name} interacted with you")

    notification_data = NotificationCreate(
        user_id=recipient_id,
        sender_id=sender_id,
        type=type,
        text=template.format(name=full_name),
        related_id=related_id,
        sender_avatar_url=sender.profile_picture_url if sender else None,
        sender_full_name=full_name,
        sender_username=username,
    )

    notification = create_notification(db, notification_data, commit=commit)
    logger.info(f"Created {type} notification for user {recipient_id} from user {sender_id}")
    return notification

def create_friend_request_notification(db: Session, sender_id: str, receiver_id: str, friendship_id: str, commit: bool = True) -> Notification:
    return create_relationship_notification(
        db, NotificationType.FRIEND_REQUEST, receiver_id, sender_id, related_id=friendship_id, commit=commit
    )

def create_friend_request_accepted_notification(db: Session, accepter_id: str, requester_id: str, friendship_id: str, commit: bool = True) -> Notification:
    return create_relationship_notification(
        db, NotificationType.FRIEND_REQUEST_ACCEPTED, requester_id, accepter_id, related_id=friendship_id, commit=commit
    )

def create_follow_notification(db: Session, follower_id: str, following_id: str, follow_id: str, is_request: bool, commit: bool = True) -> Notification:
    type = NotificationType.FOLLOW_REQUEST if is_request else NotificationType.FOLLOW
    return create_relationship_notification(
        db, type, following_id, follower_id, related_id=follow_id, commit=commit
    )
