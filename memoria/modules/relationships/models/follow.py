import enum
import uuid

from sqlalchemy import Column, String, DateTime, Enum, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from memoria.core.time_helpers import utcnow
from memoria.db.session import Base


class FollowStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Follow(Base):
    """Directed follow edge: follower_id follows following_id"""
    __tablename__ = "follows"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    follower_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    following_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    status = Column(
        Enum(FollowStatus, name="follow_status", values_callable=lambda e: [m.value for m in e]),
        default=FollowStatus.ACCEPTED,
        nullable=False,
    )
    created_at = Column(DateTime, default=utcnow)

    follower = relationship("User", foreign_keys=[follower_id])
    following = relationship("User", foreign_keys=[following_id])

    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="unique_follow"),
        CheckConstraint("follower_id != following_id", name="no_self_follow"),
    )
