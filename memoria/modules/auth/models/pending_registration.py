import uuid

from sqlalchemy import Column, String, DateTime

from memoria.core.time_helpers import utcnow
from memoria.db.session import Base

class PendingRegistration(Base):
    """Sign-up awaiting email verification; expires after PENDING_REGISTRATION_TTL_MINUTES"""
    __tablename__ = "pending_registrations"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(50), nullable=False)
    hashed_password = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    verification_code = Column(String(12), nullable=False)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=utcnow)
