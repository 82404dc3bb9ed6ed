from typing import Any, List
import logging
from fastapi import APIRouter, BackgroundTasks, Depends, Query, Response, status
from sqlalchemy.orm import Session

from memoria.db.session import get_db
from memoria.deps import get_current_user
from memoria.modules.notifications.models.notification import NotificationType
from memoria.modules.realtime.hub import NotificationHub, dispatch_notification, get_notification_hub
from memoria.modules.relationships.schemas.relationship import (
    Block as BlockSchema,
    FollowRequest as FollowRequestSchema,
    FollowResult,
    Relationship,
)
from memoria.modules.relationships.services.block import block_user, get_blocked_users, unblock_user
from memoria.modules.relationships.services.follow import (
    accept_follow_request,
    decline_follow_request,
    follow_user,
    get_follow_requests,
    get_followers,
    get_following,
    unfollow_user,
)
from memoria.modules.relationships.services.relationship import get_relationship
from memoria.modules.user_management.models.user import User
from memoria.modules.user_management.schemas.user import User as UserSchema
from memoria.modules.user_management.services.user import require_user

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("/me/follow-requests", response_model=List[FollowRequestSchema])
def read_my_follow_requests(
    *,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Pending follows awaiting approval (private accounts only)"""
    return get_follow_requests(db, current_user)

@router.get("/me/blocked", response_model=List[UserSchema])
def read_my_blocked_users(
    *,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return get_blocked_users(db, current_user.id)

@router.post("/follow-requests/{follow_id}/accept", status_code=status.HTTP_204_NO_CONTENT)
def accept_follow(
    *,
    db: Session = Depends(get_db),
    follow_id: str,
    current_user: User = Depends(get_current_user),
) -> Response:
    accept_follow_request(db, follow_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.post("/follow-requests/{follow_id}/decline", status_code=status.HTTP_204_NO_CONTENT)
def decline_follow(
    *,
    db: Session = Depends(get_db),
    follow_id: str,
    current_user: User = Depends(get_current_user),
) -> Response:
    decline_follow_request(db, follow_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.post("/{user_id}/follow", response_model=FollowResult)
def follow(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    background_tasks: BackgroundTasks,
    hub: NotificationHub = Depends(get_notification_hub),
    current_user: User = Depends(get_current_user),
) -> Any:
    follow_edge, notification = follow_user(db, current_user.id, user_id)
    dispatch_notification(background_tasks, hub, notification)

    detail = "Follow requested" if notification.type == NotificationType.FOLLOW_REQUEST else "Followed"
    return FollowResult(detail=detail, status=follow_edge.status)

@router.delete("/{user_id}/follow", status_code=status.HTTP_204_NO_CONTENT)
def unfollow(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    current_user: User = Depends(get_current_user),
) -> Response:
    unfollow_user(db, current_user.id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/{user_id}/relationship", response_model=Relationship)
def read_relationship(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    require_user(db, user_id)
    return get_relationship(db, current_user.id, user_id)

@router.post("/{user_id}/block", response_model=BlockSchema)
def block(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    return block_user(db, current_user.id, user_id)

@router.delete("/{user_id}/block", status_code=status.HTTP_204_NO_CONTENT)
def unblock(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    current_user: User = Depends(get_current_user),
) -> Response:
    unblock_user(db, current_user.id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/{user_id}/followers", response_model=List[UserSchema])
def read_followers(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    current_user: User = Depends(get_current_user),
) -> Any:
    require_user(db, user_id)
    return get_followers(db, user_id, skip=skip, limit=limit)

@router.get("/{user_id}/following", response_model=List[UserSchema])
def read_following(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    current_user: User = Depends(get_current_user),
) -> Any:
    require_user(db, user_id)
    return get_following(db, user_id, skip=skip, limit=limit)
