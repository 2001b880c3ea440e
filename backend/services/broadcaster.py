# backend/services/broadcaster.py
import logging
from collections import defaultdict
from typing import Any, Dict, Set

from fastapi.encoders import jsonable_encoder
from starlette.websockets import WebSocket

logger = logging.getLogger(__name__)

ADMIN_GROUP = "admin"


class Broadcaster:
    """In-process publish/subscribe over connected websockets.

    Delivery is fire-and-forget: nothing is queued for sockets that join later
    and a socket that fails on send is dropped from every group.
    """

    def __init__(self):
        self._groups: Dict[str, Set[WebSocket]] = defaultdict(set)

    def join(self, group: str, socket: WebSocket) -> None:
        self._groups[group].add(socket)

    def leave(self, group: str, socket: WebSocket) -> None:
        members = self._groups.get(group)
        if members is not None:
            members.discard(socket)
            if not members:
                del self._groups[group]

    def group_size(self, group: str) -> int:
        return len(self._groups.get(group, ()))

    async def send(self, socket: WebSocket, event: str, payload: Any) -> bool:
        try:
            await socket.send_json({"event": event, "data": jsonable_encoder(payload)})
            return True
        except Exception as e:
            logger.debug(f"Dropping socket after failed send of {event}: {e}")
            self._forget(socket)
            return False

    async def publish(self, group: str, event: str, payload: Any) -> int:
        members = list(self._groups.get(group, ()))
        delivered = 0
        for socket in members:
            if await self.send(socket, event, payload):
                delivered += 1
        logger.debug(f"Published {event} to {delivered}/{len(members)} sockets in '{group}'")
        return delivered

    def _forget(self, socket: WebSocket) -> None:
        for group in list(self._groups):
            self.leave(group, socket)
