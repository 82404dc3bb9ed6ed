from typing import List, Optional, Tuple
import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy import and_, or_

from memoria.core.exceptions import ConflictError, ForbiddenError, InvalidArgumentError, NotFoundError
from memoria.db.errors import is_unique_violation
from memoria.modules.friendships.models.friendship import Friendship, FriendshipStatus
from memoria.modules.notifications.models.notification import Notification, NotificationType
from memoria.modules.notifications.services.notification import delete_request_notification
from memoria.modules.notifications.services.notification_events import (
    create_friend_request_notification,
    create_friend_request_accepted_notification,
)
from memoria.modules.relationships.services.follow import ensure_follow
from memoria.modules.user_management.models.user import User
from memoria.modules.user_management.services.user import require_user

logger = logging.getLogger(__name__)

def get_bidirectional_friendship_filter(user_id: str, friend_id: str):
    """Create a filter for a friendship between two users in either direction"""
    return or_(
        and_(Friendship.user_id == user_id, Friendship.friend_id == friend_id),
        and_(Friendship.user_id == friend_id, Friendship.friend_id == user_id)
    )

def get_friendship_by_id(db: Session, friendship_id: str) -> Optional[Friendship]:
    """Get friendship by ID"""
    return db.query(Friendship).filter(Friendship.id == friendship_id).first()

def get_friendship(db: Session, user_id: str, friend_id: str) -> Optional[Friendship]:
    """Get a friendship row between two users, pending or accepted"""
    return db.query(Friendship).filter(
        get_bidirectional_friendship_filter(user_id, friend_id)
    ).first()

def check_friendship(db: Session, user_id: str, friend_id: str) -> bool:
    """Check if two users are friends"""
    return db.query(Friendship).filter(
        get_bidirectional_friendship_filter(user_id, friend_id),
        Friendship.status == FriendshipStatus.ACCEPTED,
    ).first() is not None

def get_party_friendship(db: Session, friendship_id: str, user_id: str) -> Friendship:
    """Get a friendship that user_id is part of"""
    friendship = get_friendship_by_id(db, friendship_id)
    if not friendship:
        raise NotFoundError("Friendship not found")
    if user_id not in (friendship.user_id, friendship.friend_id):
        raise ForbiddenError("Not enough permissions")
    return friendship

# Request operations
def request_friendship(db: Session, user_id: str, friend_id: str) -> Tuple[Friendship, Notification]:
    """Send a friend request from user_id to friend_id"""
    if user_id == friend_id:
        raise InvalidArgumentError("Cannot send friend request to yourself")

    require_user(db, friend_id)

    if get_friendship(db, user_id, friend_id):
        raise ConflictError("Friend request already exists")

    friendship = Friendship(user_id=user_id, friend_id=friend_id, status=FriendshipStatus.PENDING)
    db.add(friendship)
    db.flush()

    notification = create_friend_request_notification(
        db, sender_id=user_id, receiver_id=friend_id, friendship_id=friendship.id, commit=False
    )
    db.commit()
    db.refresh(friendship)
    db.refresh(notification)

    logger.info(f"Friend request {friendship.id} sent: {user_id} -> {friend_id}")
    return friendship, notification

def respond_to_friend_request(
    db: Session, friendship_id: str, accept: bool, acting_user_id: str
) -> Tuple[Friendship, Optional[Notification]]:
    """
    Accept or decline a pending friend request addressed to acting_user_id.

    Accepting marks the friendship accepted, adds follow edges both ways and
    replaces the recipient's friend_request notification with a
    friend_request_accepted notification for the requester. Declining deletes
    the friendship and its notification.
    """
    friendship = get_friendship_by_id(db, friendship_id)
    if not friendship:
        raise NotFoundError("Friend request not found")
    if friendship.friend_id != acting_user_id:
        raise ForbiddenError("Not enough permissions")
    if friendship.status != FriendshipStatus.PENDING:
        raise ConflictError(f"Friend request already {friendship.status.value}")

    delete_request_notification(db, NotificationType.FRIEND_REQUEST, friendship.friend_id, friendship.id)

    if not accept:
        friendship.status = FriendshipStatus.DECLINED
        db.delete(friendship)
        db.commit()
        logger.info(f"Friend request {friendship_id} declined by {acting_user_id}")
        return friendship, None

    friendship.status = FriendshipStatus.ACCEPTED
    try:
        ensure_follow(db, friendship.user_id, friendship.friend_id)
        ensure_follow(db, friendship.friend_id, friendship.user_id)
        notification = create_friend_request_accepted_notification(
            db,
            accepter_id=friendship.friend_id,
            requester_id=friendship.user_id,
            friendship_id=friendship.id,
            commit=False,
        )
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if is_unique_violation(e):
            logger.warning(f"Follow edge race while accepting friend request {friendship_id}")
            raise ConflictError("Relationship changed while accepting; try again")
        raise

    db.refresh(friendship)
    db.refresh(notification)

    logger.info(f"Friend request {friendship_id} accepted: {friendship.user_id} <-> {friendship.friend_id}")
    return friendship, notification

def revoke_friend_request(db: Session, friendship_id: str, acting_user_id: str) -> None:
    """Withdraw a pending request sent by acting_user_id"""
    friendship = get_friendship_by_id(db, friendship_id)
    if not friendship:
        raise NotFoundError("Friend request not found")
    if friendship.user_id != acting_user_id:
        raise ForbiddenError("Not enough permissions")
    if friendship.status != FriendshipStatus.PENDING:
        raise ConflictError("Only pending friend requests can be revoked")

    delete_request_notification(db, NotificationType.FRIEND_REQUEST, friendship.friend_id, friendship.id)
    db.delete(friendship)
    db.commit()
    logger.info(f"Friend request {friendship_id} revoked by {acting_user_id}")

def remove_friendship(db: Session, friendship_id: str, acting_user_id: str) -> None:
    """Delete a friendship either party belongs to; follow edges stay"""
    friendship = get_party_friendship(db, friendship_id, acting_user_id)

    if friendship.status == FriendshipStatus.PENDING:
        delete_request_notification(db, NotificationType.FRIEND_REQUEST, friendship.friend_id, friendship.id)
    db.delete(friendship)
    db.commit()
    logger.info(f"Friendship {friendship_id} removed by {acting_user_id}")

def get_incoming_requests(db: Session, user_id: str) -> List[Tuple[Friendship, User]]:
    """Pending requests addressed to user_id, paired with the requester"""
    requests = db.query(Friendship).filter(
        Friendship.friend_id == user_id,
        Friendship.status == FriendshipStatus.PENDING,
    ).order_by(Friendship.created_at.desc()).all()
    return [(f, f.user) for f in requests]

def get_outgoing_requests(db: Session, user_id: str) -> List[Tuple[Friendship, User]]:
    """Pending requests sent by user_id, paired with the recipient"""
    requests = db.query(Friendship).filter(
        Friendship.user_id == user_id,
        Friendship.status == FriendshipStatus.PENDING,
    ).order_by(Friendship.created_at.desc()).all()
    return [(f, f.friend) for f in requests]

def get_friend_ids(db: Session, user_id: str) -> List[str]:
    rows = db.query(Friendship.user_id, Friendship.friend_id).filter(
        or_(Friendship.user_id == user_id, Friendship.friend_id == user_id),
        Friendship.status == FriendshipStatus.ACCEPTED,
    ).all()
    return [friend_id if owner_id == user_id else owner_id for owner_id, friend_id in rows]

def get_friends(db: Session, user_id: str) -> List[User]:
    """Get a user's friends (as User objects)"""
    friend_ids = get_friend_ids(db, user_id)
    if not friend_ids:
        return []
    return db.query(User).filter(User.id.in_(friend_ids)).order_by(User.username).all()
