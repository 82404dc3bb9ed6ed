from datetime import datetime
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from memoria.modules.relationships.models.follow import FollowStatus
from memoria.modules.user_management.schemas.user import UserSummary

class Relationship(BaseModel):
    """Relationship summary between the current user and a target, serialized in camelCase"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    is_following: bool = False
    is_friend: bool = False
    is_blocked: bool = False   # current user blocked the target
    has_blocked: bool = False  # target blocked the current user

class FollowResult(BaseModel):
    detail: str
    status: FollowStatus

class FollowInDBBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    follower_id: str
    following_id: str
    status: FollowStatus
    created_at: datetime

class FollowRequest(FollowInDBBase):
    """Pending follow of a private account, with the follower embedded"""
    follower: UserSummary

class BlockInDBBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    blocker_id: str
    blocked_id: str
    created_at: datetime

class Block(BlockInDBBase):
    """Block edge returned to client"""
    pass
