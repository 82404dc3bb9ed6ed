from typing import List, Optional, Tuple
import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from memoria.core.exceptions import ConflictError, ForbiddenError, InvalidArgumentError, NotFoundError
from memoria.db.errors import is_unique_violation
from memoria.modules.notifications.models.notification import Notification, NotificationType
from memoria.modules.notifications.services.notification import delete_request_notification
from memoria.modules.notifications.services.notification_events import create_follow_notification
from memoria.modules.relationships.models.follow import Follow, FollowStatus
from memoria.modules.user_management.models.user import User
from memoria.modules.user_management.services.user import require_user

logger = logging.getLogger(__name__)

def get_follow(db: Session, follower_id: str, following_id: str) -> Optional[Follow]:
    """Get the follow edge follower_id -> following_id, whatever its status"""
    return db.query(Follow).filter(
        Follow.follower_id == follower_id,
        Follow.following_id == following_id,
    ).first()

def get_follow_by_id(db: Session, follow_id: str) -> Optional[Follow]:
    return db.query(Follow).filter(Follow.id == follow_id).first()

def is_following(db: Session, follower_id: str, following_id: str) -> bool:
    return get_follow(db, follower_id, following_id) is not None

def ensure_follow(db: Session, follower_id: str, following_id: str) -> bool:
    """Add an accepted follow edge, or promote a pending one; the caller commits"""
    follow = get_follow(db, follower_id, following_id)
    if follow is not None:
        if follow.status != FollowStatus.PENDING:
            return False
        follow.status = FollowStatus.ACCEPTED
        delete_request_notification(db, NotificationType.FOLLOW_REQUEST, following_id, follow.id)
        return True
    db.add(Follow(follower_id=follower_id, following_id=following_id, status=FollowStatus.ACCEPTED))
    return True

def follow_user(db: Session, follower_id: str, following_id: str) -> Tuple[Follow, Notification]:
    """
    Follow another user.

    The edge is written immediately even for private accounts; a private target
    gets a pending edge and a follow_request notification instead of a follow one.
    """
    if follower_id == following_id:
        raise InvalidArgumentError("Cannot follow yourself")

    target = require_user(db, following_id)

    if is_following(db, follower_id, following_id):
        raise ConflictError("Already following this user")

    is_request = bool(target.is_private)
    follow = Follow(
        follower_id=follower_id,
        following_id=following_id,
        status=FollowStatus.PENDING if is_request else FollowStatus.ACCEPTED,
    )
    db.add(follow)
    try:
        db.flush()
        notification = create_follow_notification(
            db, follower_id, following_id, follow.id, is_request=is_request, commit=False
        )
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if is_unique_violation(e):
            raise ConflictError("Already following this user")
        raise

    db.refresh(follow)
    db.refresh(notification)
    logger.info(f"User {follower_id} followed {following_id} ({follow.status.value})")
    return follow, notification

def unfollow_user(db: Session, follower_id: str, following_id: str) -> None:
    follow = get_follow(db, follower_id, following_id)
    if not follow:
        raise NotFoundError("Not following this user")

    if follow.status == FollowStatus.PENDING:
        delete_request_notification(db, NotificationType.FOLLOW_REQUEST, following_id, follow.id)
    db.delete(follow)
    db.commit()
    logger.info(f"User {follower_id} unfollowed {following_id}")

def get_followers(db: Session, user_id: str, skip: int = 0, limit: int = 50) -> List[User]:
    """Users with a follow edge into user_id, any status"""
    return db.query(User).join(Follow, Follow.follower_id == User.id).filter(
        Follow.following_id == user_id
    ).order_by(Follow.created_at.desc()).offset(skip).limit(limit).all()

def get_following(db: Session, user_id: str, skip: int = 0, limit: int = 50) -> List[User]:
    """Users user_id has a follow edge to, any status"""
    return db.query(User).join(Follow, Follow.following_id == User.id).filter(
        Follow.follower_id == user_id
    ).order_by(Follow.created_at.desc()).offset(skip).limit(limit).all()

# Follow requests (private accounts)
def get_follow_requests(db: Session, user: User) -> List[Follow]:
    """Pending follows targeting a private account, newest first"""
    if not user.is_private:
        raise ForbiddenError("Follow requests are only available for private accounts")
    return db.query(Follow).filter(
        Follow.following_id == user.id,
        Follow.status == FollowStatus.PENDING,
    ).order_by(Follow.created_at.desc()).all()

def _get_pending_request(db: Session, follow_id: str, target_id: str) -> Follow:
    follow = get_follow_by_id(db, follow_id)
    if not follow:
        raise NotFoundError("Follow request not found")
    if follow.following_id != target_id:
        raise ForbiddenError("Not enough permissions")
    if follow.status != FollowStatus.PENDING:
        raise ConflictError(f"Follow request already {follow.status.value}")
    return follow

def accept_follow_request(db: Session, follow_id: str, target_id: str) -> Follow:
    follow = _get_pending_request(db, follow_id, target_id)

    follow.status = FollowStatus.ACCEPTED
    delete_request_notification(db, NotificationType.FOLLOW_REQUEST, target_id, follow.id)
    db.commit()
    db.refresh(follow)

    logger.info(f"Follow request {follow_id} accepted by {target_id}")
    return follow

def decline_follow_request(db: Session, follow_id: str, target_id: str) -> None:
    follow = _get_pending_request(db, follow_id, target_id)

    delete_request_notification(db, NotificationType.FOLLOW_REQUEST, target_id, follow.id)
    db.delete(follow)
    db.commit()

    logger.info(f"Follow request {follow_id} declined by {target_id}")
