from typing import List, Optional
import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from memoria.core.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from memoria.db.errors import is_unique_violation
from memoria.modules.relationships.models.block import Block
from memoria.modules.user_management.models.user import User
from memoria.modules.user_management.services.user import require_user

logger = logging.getLogger(__name__)

def get_block(db: Session, blocker_id: str, blocked_id: str) -> Optional[Block]:
    return db.query(Block).filter(
        Block.blocker_id == blocker_id,
        Block.blocked_id == blocked_id,
    ).first()

def is_blocking(db: Session, blocker_id: str, blocked_id: str) -> bool:
    return get_block(db, blocker_id, blocked_id) is not None

def block_user(db: Session, blocker_id: str, blocked_id: str) -> Block:
    """Block a user. Follow and friendship rows between the pair are left as they are."""
    if blocker_id == blocked_id:
        raise InvalidArgumentError("Cannot block yourself")

    require_user(db, blocked_id)

    if is_blocking(db, blocker_id, blocked_id):
        raise ConflictError("User already blocked")

    block = Block(blocker_id=blocker_id, blocked_id=blocked_id)
    db.add(block)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if is_unique_violation(e):
            raise ConflictError("User already blocked")
        raise

    db.refresh(block)
    logger.info(f"User {blocker_id} blocked {blocked_id}")
    return block

def unblock_user(db: Session, blocker_id: str, blocked_id: str) -> None:
    block = get_block(db, blocker_id, blocked_id)
    if not block:
        raise NotFoundError("User is not blocked")

    db.delete(block)
    db.commit()
    logger.info(f"User {blocker_id} unblocked {blocked_id}")

def get_blocked_users(db: Session, blocker_id: str) -> List[User]:
    return db.query(User).join(Block, Block.blocked_id == User.id).filter(
        Block.blocker_id == blocker_id
    ).order_by(Block.created_at.desc()).all()
