from datetime import datetime
from pydantic import BaseModel, ConfigDict

from memoria.modules.friendships.models.friendship import FriendshipStatus
from memoria.modules.user_management.schemas.user import UserSummary

class FriendshipCreate(BaseModel):
    user_id: str
    friend_id: str

class FriendshipRespond(BaseModel):
    accept: bool = False

class FriendshipInDBBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    friend_id: str
    status: FriendshipStatus
    created_at: datetime
    updated_at: datetime

class Friendship(FriendshipInDBBase):
    """Friendship model returned to client"""
    pass

class FriendRequest(FriendshipInDBBase):
    """Pending friendship with the other party embedded"""
    counterpart: UserSummary
