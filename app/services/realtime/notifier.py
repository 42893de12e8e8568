"""
Realtime Notifier

Room-based fan-out to connected websocket clients.

Rooms:
    - table_<n>: every guest device at table n
    - kitchen:   every kitchen display (name from KITCHEN_ROOM)

Delivery is best effort and in-process: a message reaches the members
of a room at the moment of publish, nothing is buffered or replayed,
and a failed send is logged and dropped.

Author: Khalil Bannouri
Version: 4.0.0
"""

import asyncio
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

# Sends one JSON-serializable message to a single client
Sender = Callable[[dict[str, Any]], Awaitable[None]]


def table_room(table_no: int) -> str:
    return f"table_{table_no}"


class RealtimeNotifier:
    """
    Publish/subscribe hub keyed by room name.

    Example:
        >>> notifier = RealtimeNotifier()
        >>> notifier.register("conn-1", websocket.send_json)
        >>> notifier.subscribe_table("conn-1", 4)
        >>> await notifier.publish("table_4", "orderConfirmed", {...})
        1
    """

    def __init__(self, kitchen_room: str = "kitchen", send_timeout: float = 5.0):
        self.kitchen_room = kitchen_room
        self.send_timeout = send_timeout
        self._senders: dict[str, Sender] = {}
        self._rooms: dict[str, set[str]] = defaultdict(set)
        self._memberships: dict[str, set[str]] = defaultdict(set)

    @property
    def connection_count(self) -> int:
        return len(self._senders)

    def register(self, connection_id: str, send: Sender) -> None:
        """Remember how to reach a newly opened connection."""
        self._senders[connection_id] = send
        logger.info(f"Client connected: {connection_id}")

    def _join(self, connection_id: str, room: str) -> str:
        if connection_id not in self._senders:
            raise KeyError(f"Unknown connection {connection_id}")
        self._rooms[room].add(connection_id)
        self._memberships[connection_id].add(room)
        logger.info(f"Connection {connection_id} joined {room}")
        return room

    def subscribe_table(self, connection_id: str, table_no: int) -> str:
        """Join the room of one table. Returns the room name."""
        return self._join(connection_id, table_room(table_no))

    def subscribe_kitchen(self, connection_id: str) -> str:
        """Join the shared kitchen room. Returns the room name."""
        return self._join(connection_id, self.kitchen_room)

    def unsubscribe_all(self, connection_id: str) -> None:
        """Drop a connection from every room it joined (on disconnect)."""
        for room in self._memberships.pop(connection_id, set()):
            members = self._rooms.get(room)
            if members is not None:
                members.discard(connection_id)
                if not members:
                    del self._rooms[room]
        self._senders.pop(connection_id, None)
        logger.info(f"Client disconnected: {connection_id}")

    def members(self, room: str) -> set[str]:
        return set(self._rooms.get(room, ()))

    async def publish(self, room: str, event: str, payload: dict[str, Any]) -> int:
        """
        Deliver an event to everyone currently in `room`.

        Args:
            room: Target room name
            event: Event name (e.g. "newOrder")
            payload: JSON-serializable body

        Returns:
            int: Number of clients the message was delivered to
        """
        recipients = [
            (cid, self._senders[cid])
            for cid in self._rooms.get(room, ())
            if cid in self._senders
        ]
        if not recipients:
            logger.debug(f"No subscribers in {room} for {event}")
            return 0

        message = {"event": event, "data": payload}
        results = await asyncio.gather(
            *(self._send(cid, send, message) for cid, send in recipients)
        )
        delivered = sum(results)
        logger.debug(f"{event} -> {room}: {delivered}/{len(recipients)} delivered")
        return delivered

    async def _send(self, connection_id: str, send: Sender, message: dict[str, Any]) -> bool:
        try:
            await asyncio.wait_for(send(message), timeout=self.send_timeout)
            return True
        except asyncio.TimeoutError:
            logger.warning(
                f"Dropped {message['event']} for {connection_id}: "
                f"send timed out after {self.send_timeout}s"
            )
        except Exception as e:
            logger.warning(f"Dropped {message['event']} for {connection_id}: {e}")
        return False
