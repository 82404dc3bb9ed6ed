import uuid

from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, Text

from memoria.core.time_helpers import utcnow
from memoria.db.session import Base

class NotificationType:
    FRIEND_REQUEST = "friend_request"
    FRIEND_REQUEST_ACCEPTED = "friend_request_accepted"
    FOLLOW = "follow"
    FOLLOW_REQUEST = "follow_request"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    type = Column(String(50), nullable=False)  # See NotificationType
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)  # Recipient
    sender_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    # Sender display fields captured at creation time
    sender_avatar_url = Column(String, nullable=True)
    sender_full_name = Column(String(200), nullable=True)
    sender_username = Column(String(50), nullable=True)
    text = Column(Text, nullable=False)
    related_id = Column(String(36), nullable=True)  # Friendship or follow id, depending on type
    group_id = Column(String(36), nullable=True)
    read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, index=True)
