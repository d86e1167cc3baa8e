"""
In-process room hub.

Connections only need an async ``send_json``; a FastAPI ``WebSocket``
qualifies. Delivery is fire-and-forget: nothing is stored, and a
connection whose send fails is dropped from every room.
"""
import asyncio
import logging
from collections import defaultdict
from typing import Any, Dict, Optional, Set

logger = logging.getLogger(__name__)


class RoomHub:
    def __init__(self):
        self.rooms: Dict[str, Set[Any]] = defaultdict(set)
        self.connections: Set[Any] = set()

    def connect(self, connection):
        self.connections.add(connection)

    def disconnect(self, connection):
        self.connections.discard(connection)
        for room in list(self.rooms):
            self.leave(room, connection)

    def join(self, room: str, connection):
        self.connections.add(connection)
        self.rooms[room].add(connection)

    def leave(self, room: str, connection):
        members = self.rooms.get(room)
        if members is None:
            return
        members.discard(connection)
        if not members:
            del self.rooms[room]

    def members(self, room: str) -> Set[Any]:
        return set(self.rooms.get(room, ()))

    async def publish(self, room: str, event: str, payload: dict, exclude=None) -> int:
        targets = self.members(room)
        return await self._send(targets, event, payload, exclude)

    async def broadcast(self, event: str, payload: dict, exclude=None) -> int:
        return await self._send(set(self.connections), event, payload, exclude)

    async def _send(self, targets: Set[Any], event: str, payload: dict, exclude: Optional[Any]) -> int:
        targets.discard(exclude)
        if not targets:
            return 0

        message = {"event": event, "data": payload}
        targets = list(targets)
        results = await asyncio.gather(
            *(conn.send_json(message) for conn in targets),
            return_exceptions=True,
        )

        delivered = 0
        for conn, result in zip(targets, results):
            if isinstance(result, Exception):
                logger.warning(f"Dropping connection after failed send of {event}: {result}")
                self.disconnect(conn)
            else:
                delivered += 1
        return delivered


hub = RoomHub()
