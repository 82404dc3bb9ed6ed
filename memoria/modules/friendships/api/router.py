from typing import Any, List, Tuple

from fastapi import APIRouter, BackgroundTasks, Depends, Response, status
from sqlalchemy.orm import Session

from memoria.core.exceptions import ForbiddenError
from memoria.db.session import get_db
from memoria.deps import get_current_user
from memoria.modules.friendships.models.friendship import Friendship
from memoria.modules.friendships.schemas.friendship import (
    FriendRequest as FriendRequestSchema,
    Friendship as FriendshipSchema,
    FriendshipCreate,
    FriendshipRespond,
)
from memoria.modules.friendships.services.friendship import (
    get_friends,
    get_incoming_requests,
    get_outgoing_requests,
    get_party_friendship,
    remove_friendship,
    request_friendship,
    respond_to_friend_request,
    revoke_friend_request,
)
from memoria.modules.realtime.hub import NotificationHub, dispatch_notification, get_notification_hub
from memoria.modules.user_management.models.user import User
from memoria.modules.user_management.schemas.user import User as UserSchema, UserSummary

router = APIRouter()

def _to_friend_request(pair: Tuple[Friendship, User]) -> FriendRequestSchema:
    friendship, counterpart = pair
    return FriendRequestSchema(
        **FriendshipSchema.model_validate(friendship).model_dump(),
        counterpart=UserSummary.model_validate(counterpart),
    )

def _respond(
    db: Session,
    friendship_id: str,
    accept: bool,
    current_user: User,
    background_tasks: BackgroundTasks,
    hub: NotificationHub,
) -> Response:
    _, notification = respond_to_friend_request(db, friendship_id, accept, current_user.id)
    if notification is not None:
        dispatch_notification(background_tasks, hub, notification)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.post("", response_model=FriendshipSchema, status_code=status.HTTP_201_CREATED)
def send_friend_request(
    *,
    db: Session = Depends(get_db),
    request_in: FriendshipCreate,
    background_tasks: BackgroundTasks,
    hub: NotificationHub = Depends(get_notification_hub),
    current_user: User = Depends(get_current_user),
) -> Any:
    if request_in.user_id != current_user.id:
        raise ForbiddenError("Cannot send friend requests on behalf of another user")

    friendship, notification = request_friendship(db, current_user.id, request_in.friend_id)
    dispatch_notification(background_tasks, hub, notification)
    return friendship

@router.get("", response_model=List[UserSchema])
def read_my_friends(
    *,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return get_friends(db, current_user.id)

@router.get("/incoming", response_model=List[FriendRequestSchema])
def read_incoming_requests(
    *,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return [_to_friend_request(pair) for pair in get_incoming_requests(db, current_user.id)]

@router.get("/outgoing", response_model=List[FriendRequestSchema])
def read_outgoing_requests(
    *,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return [_to_friend_request(pair) for pair in get_outgoing_requests(db, current_user.id)]

@router.get("/{friendship_id}", response_model=FriendshipSchema)
def read_friendship(
    *,
    db: Session = Depends(get_db),
    friendship_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    return get_party_friendship(db, friendship_id, current_user.id)

@router.put("/{friendship_id}", status_code=status.HTTP_204_NO_CONTENT)
def respond_to_friend_request_route(
    *,
    db: Session = Depends(get_db),
    friendship_id: str,
    respond_in: FriendshipRespond,
    background_tasks: BackgroundTasks,
    hub: NotificationHub = Depends(get_notification_hub),
    current_user: User = Depends(get_current_user),
) -> Response:
    return _respond(db, friendship_id, respond_in.accept, current_user, background_tasks, hub)

@router.post("/{friendship_id}/accept", status_code=status.HTTP_204_NO_CONTENT)
def accept_friend_request(
    *,
    db: Session = Depends(get_db),
    friendship_id: str,
    background_tasks: BackgroundTasks,
    hub: NotificationHub = Depends(get_notification_hub),
    current_user: User = Depends(get_current_user),
) -> Response:
    return _respond(db, friendship_id, True, current_user, background_tasks, hub)

@router.post("/{friendship_id}/decline", status_code=status.HTTP_204_NO_CONTENT)
def decline_friend_request(
    *,
    db: Session = Depends(get_db),
    friendship_id: str,
    background_tasks: BackgroundTasks,
    hub: NotificationHub = Depends(get_notification_hub),
    current_user: User = Depends(get_current_user),
) -> Response:
    return _respond(db, friendship_id, False, current_user, background_tasks, hub)

@router.delete("/{friendship_id}/revoke", status_code=status.HTTP_204_NO_CONTENT)
def revoke_request(
    *,
    db: Session = Depends(get_db),
    friendship_id: str,
    current_user: User = Depends(get_current_user),
) -> Response:
    revoke_friend_request(db, friendship_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.delete("/{friendship_id}", status_code=status.HTTP_204_NO_CONTENT)
def unfriend(
    *,
    db: Session = Depends(get_db),
    friendship_id: str,
    current_user: User = Depends(get_current_user),
) -> Response:
    remove_friendship(db, friendship_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
