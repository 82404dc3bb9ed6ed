"""
Real-time fan-out of notifications and presence over WebSockets.

Delivery is at-most-once and best-effort: the persisted notification row is
the source of truth and clients reconcile by polling. Nothing in here raises
into the HTTP request that produced the event.
"""
from collections import defaultdict
from typing import Any, Dict, Iterable, Set
import logging

from fastapi import BackgroundTasks, WebSocket

from memoria.modules.notifications.models.notification import Notification
from memoria.modules.notifications.schemas.notification import Notification as NotificationSchema

logger = logging.getLogger(__name__)

RECEIVE_NOTIFICATION = "ReceiveNotification"
USER_STATUS_CHANGED = "UserStatusChanged"


class NotificationHub:
    """Live connections keyed by user id; a user may hold several"""

    def __init__(self) -> None:
        self.active_connections: Dict[str, Set[WebSocket]] = defaultdict(set)

    async def connect(self, websocket: WebSocket, user_id: str) -> None:
        await websocket.accept()
        self.active_connections[user_id].add(websocket)
        logger.info(f"WebSocket connected: {user_id} ({len(self.active_connections[user_id])} open)")

    def disconnect(self, websocket: WebSocket, user_id: str) -> None:
        connections = self.active_connections.get(user_id)
        if not connections:
            return
        connections.discard(websocket)
        if not connections:
            del self.active_connections[user_id]
        logger.info(f"WebSocket disconnected: {user_id}")

    def is_online(self, user_id: str) -> bool:
        return bool(self.active_connections.get(user_id))

    async def publish(self, user_id: str, event: str, payload: Any) -> int:
        """Send an event to every connection of user_id; returns how many sends succeeded"""
        delivered = 0
        for websocket in list(self.active_connections.get(user_id, ())):
            try:
                await websocket.send_json({"event": event, "data": payload})
                delivered += 1
            except Exception as e:
                logger.warning(f"Dropping connection for {user_id} after failed {event} push: {e}")
                self.disconnect(websocket, user_id)
        if not delivered:
            logger.debug(f"No live connection for {user_id}; {event} left for polling")
        return delivered

    async def broadcast_status(self, user_id: str, online: bool, friend_ids: Iterable[str]) -> None:
        payload = {"user_id": user_id, "online": online}
        for friend_id in friend_ids:
            if self.is_online(friend_id):
                await self.publish(friend_id, USER_STATUS_CHANGED, payload)


notification_hub = NotificationHub()


def get_notification_hub() -> NotificationHub:
    return notification_hub


async def _deliver(hub: NotificationHub, user_id: str, event: str, payload: Any) -> None:
    try:
        await hub.publish(user_id, event, payload)
    except Exception:
        logger.exception(f"Real-time delivery of {event} to {user_id} failed")


def dispatch_notification(background_tasks: BackgroundTasks, hub: NotificationHub, notification: Notification) -> None:
    """Schedule a push of a committed notification after the response is sent"""
    payload = NotificationSchema.model_validate(notification).model_dump(mode="json")
    background_tasks.add_task(_deliver, hub, notification.user_id, RECEIVE_NOTIFICATION, payload)
