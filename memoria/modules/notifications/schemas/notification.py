from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict

class NotificationBase(BaseModel):
    type: str
    text: str
    related_id: Optional[str] = None
    group_id: Optional[str] = None

class NotificationCreate(NotificationBase):
    user_id: str
    sender_id: Optional[str] = None  # ID of the user who triggered the notification
    sender_avatar_url: Optional[str] = None
    sender_full_name: Optional[str] = None
    sender_username: Optional[str] = None

class NotificationInDBBase(NotificationCreate):
    model_config = ConfigDict(from_attributes=True)

    id: str
    read: bool
    created_at: datetime

class Notification(NotificationInDBBase):
    """Notification model returned to client and pushed over the hub"""
    pass

class UnreadCount(BaseModel):
    count: int

class BulkResult(BaseModel):
    message: str
    count: int
