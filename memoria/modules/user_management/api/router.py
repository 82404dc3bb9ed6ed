from typing import Any, List
import logging
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from memoria.db.session import get_db
from memoria.deps import get_current_user
from memoria.core.exceptions import NotFoundError
from memoria.modules.realtime.hub import NotificationHub, get_notification_hub
from memoria.modules.user_management.models.user import User
from memoria.modules.user_management.schemas.user import OnlineStatus, User as UserSchema, UserMe, UserUpdate
from memoria.modules.user_management.services.user import (
    get_user_by_username,
    get_users,
    require_user,
    search_users,
    update_user,
)

router = APIRouter()
logger = logging.getLogger("memoria")

@router.get("/me", response_model=UserMe)
def read_user_me(
    current_user: User = Depends(get_current_user),
) -> Any:
    """Get current user"""
    return current_user

@router.put("/me", response_model=UserMe)
def update_user_me(
    *,
    db: Session = Depends(get_db),
    user_in: UserUpdate,
    current_user: User = Depends(get_current_user),
) -> Any:
    """Update current user's profile; existing notifications keep the old name and avatar"""
    return update_user(db, current_user, user_in)

@router.get("/search", response_model=List[UserSchema])
def search(
    *,
    db: Session = Depends(get_db),
    q: str = Query(..., min_length=1, description="Search query for name or username"),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Search for users by name or username"""
    return search_users(db, q, current_user.id)

@router.get("/username/{username}", response_model=UserSchema)
def read_user_by_username(
    username: str,
    db: Session = Depends(get_db),
) -> Any:
    """Get a specific user by username"""
    user = get_user_by_username(db, username=username)
    if not user:
        raise NotFoundError("User not found")
    return user

@router.get("", response_model=List[UserSchema])
def read_users(
    db: Session = Depends(get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
) -> Any:
    """Retrieve users with pagination"""
    return get_users(db, skip=skip, limit=limit)

@router.get("/{user_id}", response_model=UserSchema)
def read_user_by_id(
    user_id: str,
    db: Session = Depends(get_db),
) -> Any:
    """Get a specific user by id"""
    return require_user(db, user_id)

@router.get("/{user_id}/online", response_model=OnlineStatus)
def read_user_online(
    user_id: str,
    db: Session = Depends(get_db),
    hub: NotificationHub = Depends(get_notification_hub),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Whether a user currently holds a live notification connection"""
    require_user(db, user_id)
    return OnlineStatus(user_id=user_id, online=hub.is_online(user_id))
