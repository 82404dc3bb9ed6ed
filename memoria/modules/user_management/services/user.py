from typing import List, Optional
from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from memoria.core.exceptions import NotFoundError
from memoria.modules.relationships.models.block import Block
from memoria.modules.user_management.models.user import User
from memoria.modules.user_management.schemas.user import UserUpdate

def get_user(db: Session, user_id: str) -> Optional[User]:
    """Get user by ID"""
    return db.query(User).filter(User.id == user_id).first()

def require_user(db: Session, user_id: str) -> User:
    """Get user by ID or raise NotFoundError"""
    user = get_user(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user

def get_user_by_username(db: Session, username: str) -> Optional[User]:
    """Get user by username"""
    return db.query(User).filter(User.username == username).first()

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get user by email"""
    return db.query(User).filter(func.lower(User.email) == email.lower()).first()

def get_user_by_login(db: Session, login: str) -> Optional[User]:
    """Get user by username or email"""
    if "@" in login:
        return get_user_by_email(db, login)
    return get_user_by_username(db, login)

def get_users(db: Session, skip: int = 0, limit: int = 100) -> List[User]:
    """Get list of users"""
    return db.query(User).order_by(User.created_at).offset(skip).limit(limit).all()

def search_users(db: Session, q: str, current_user_id: str, limit: int = 20) -> List[User]:
    """Search users by username or name, hiding anyone in a block with the caller"""
    terms = q.lower().split()
    if not terms:
        return []

    query = db.query(User)
    for term in terms:
        pattern = f"%{term}%"
        query = query.filter(
            or_(
                User.username.ilike(pattern),
                User.first_name.ilike(pattern),
                User.last_name.ilike(pattern),
            )
        )

    blocked_either_way = db.query(Block.id).filter(
        or_(
            and_(Block.blocker_id == current_user_id, Block.blocked_id == User.id),
            and_(Block.blocker_id == User.id, Block.blocked_id == current_user_id),
        )
    ).exists()

    return query.filter(
        User.id != current_user_id,
        User.is_active == True,  # noqa: E712
        ~blocked_either_way,
    ).order_by(User.username).limit(limit).all()

def update_user(db: Session, user: User, user_in: UserUpdate) -> User:
    """Update user profile fields"""
    update_data = user_in.model_dump(exclude_unset=True)

    # Apply all updates at once
    for field, value in update_data.items():
        setattr(user, field, value)

    db.add(user)
    db.commit()
    db.refresh(user)

    return user
