import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, CheckConstraint

from memoria.core.time_helpers import utcnow
from memoria.db.session import Base


class Block(Base):
    """Directed block edge: blocker_id blocks blocked_id"""
    __tablename__ = "blocks"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    blocker_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    blocked_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow)

    __table_args__ = (
        UniqueConstraint("blocker_id", "blocked_id", name="unique_block"),
        CheckConstraint("blocker_id != blocked_id", name="no_self_block"),
    )
