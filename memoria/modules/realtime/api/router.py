from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List, Tuple
import logging

from memoria.db.session import get_db
from memoria.deps import get_user_from_token
from memoria.modules.friendships.services.friendship import get_friend_ids
from memoria.modules.realtime.hub import NotificationHub, get_notification_hub

router = APIRouter()
logger = logging.getLogger(__name__)


def _authenticate(db: Session, access_token: str) -> Tuple[str, List[str]]:
    try:
        user = get_user_from_token(db, access_token)
        return user.id, get_friend_ids(db, user.id)
    finally:
        db.close()


def _current_friend_ids(db: Session, user_id: str) -> List[str]:
    try:
        return get_friend_ids(db, user_id)
    finally:
        db.close()


@router.websocket("/hubs/notifications")
async def notifications_socket(
    websocket: WebSocket,
    access_token: str = Query(None),
    db: Session = Depends(get_db),
    hub: NotificationHub = Depends(get_notification_hub),
):
    """
    Live notification channel.

    Clients authenticate with the same bearer token used for REST, passed as
    the access_token query parameter. Friends online at connect and disconnect
    time receive a UserStatusChanged event; the friend list is read again on
    disconnect so friendships made or ended meanwhile are respected.
    """
    if not access_token:
        logger.warning("Notification socket rejected: no access token")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    # database work runs in the threadpool; the session is released before the socket opens
    try:
        user_id, friend_ids = await run_in_threadpool(_authenticate, db, access_token)
    except HTTPException as e:
        logger.warning(f"Notification socket rejected: {e.detail}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await hub.connect(websocket, user_id)
    await hub.broadcast_status(user_id, True, friend_ids)

    try:
        while True:
            message = await websocket.receive_text()
            if message.strip().lower() == "ping":
                await websocket.send_json({"event": "pong"})
    except WebSocketDisconnect:
        pass
    finally:
        hub.disconnect(websocket, user_id)
        try:
            friend_ids = await run_in_threadpool(_current_friend_ids, db, user_id)
        except SQLAlchemyError as e:
            logger.warning(f"Could not refresh friends of {user_id} on disconnect, using connect-time list: {e}")
        await hub.broadcast_status(user_id, False, friend_ids)
