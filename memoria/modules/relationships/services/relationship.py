from sqlalchemy.orm import Session

from memoria.modules.friendships.services.friendship import check_friendship
from memoria.modules.relationships.schemas.relationship import Relationship
from memoria.modules.relationships.services.block import is_blocking
from memoria.modules.relationships.services.follow import is_following

def get_relationship(db: Session, current_user_id: str, target_user_id: str) -> Relationship:
    """Summarize follow, friendship and block state between two users; each flag is queried on its own"""
    if current_user_id == target_user_id:
        return Relationship()

    return Relationship(
        is_following=is_following(db, current_user_id, target_user_id),
        is_friend=check_friendship(db, current_user_id, target_user_id),
        is_blocked=is_blocking(db, current_user_id, target_user_id),
        has_blocked=is_blocking(db, target_user_id, current_user_id),
    )
