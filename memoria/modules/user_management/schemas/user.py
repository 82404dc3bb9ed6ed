from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr

class UserBase(BaseModel):
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    bio: Optional[str] = None
    profile_picture_url: Optional[str] = None
    cover_photo_url: Optional[str] = None

class UserUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    bio: Optional[str] = None
    profile_picture_url: Optional[str] = None
    cover_photo_url: Optional[str] = None
    birthday: Optional[str] = None
    gender: Optional[str] = None
    is_private: Optional[bool] = None

class UserInDBBase(UserBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    is_private: bool
    created_at: datetime

class User(UserInDBBase):
    """Public profile returned to other users"""
    pass

class UserMe(UserInDBBase):
    """Profile returned to its owner"""
    email: EmailStr
    birthday: Optional[str] = None
    gender: Optional[str] = None
    is_active: bool
    updated_at: datetime

class UserSummary(BaseModel):
    """Counterpart user embedded in friendship and follow listings"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    full_name: str
    profile_picture_url: Optional[str] = None

class OnlineStatus(BaseModel):
    user_id: str
    online: bool
