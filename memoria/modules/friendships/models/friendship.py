import enum
import uuid

from sqlalchemy import Column, String, DateTime, Enum, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from memoria.core.time_helpers import utcnow
from memoria.db.session import Base


class FriendshipStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


# Stored directed (requester -> recipient) but meaningful in both directions
class Friendship(Base):
    __tablename__ = "friendships"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    friend_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    status = Column(
        Enum(FriendshipStatus, name="friendship_status", values_callable=lambda e: [m.value for m in e]),
        default=FriendshipStatus.PENDING,
        nullable=False,
    )
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    user = relationship("User", foreign_keys=[user_id])
    friend = relationship("User", foreign_keys=[friend_id])

    __table_args__ = (
        CheckConstraint("user_id != friend_id", name="no_self_friendship"),
    )

    @property
    def accepted(self) -> bool:
        return self.status == FriendshipStatus.ACCEPTED
