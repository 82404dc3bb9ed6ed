import uuid

from sqlalchemy import Boolean, Column, String, DateTime, Text

from memoria.core.time_helpers import utcnow
from memoria.db.session import Base

class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(50), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    bio = Column(Text, nullable=True)
    profile_picture_url = Column(String, nullable=True)
    cover_photo_url = Column(String, nullable=True)
    birthday = Column(String(20), nullable=True)
    gender = Column(String(20), nullable=True)
    is_private = Column(Boolean, default=False, nullable=False)  # Gates follow approval
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part).strip()
