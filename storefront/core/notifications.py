# storefront/core/notifications.py
"""
In-process push channel.

Rooms:
  - "<user_id>" : events for a single customer (order-notification)
  - "admin"     : back-office listeners (stock-update)

Delivery is best-effort: no persistence, no replay, no acknowledgement.
A listener that is not connected when an event is published misses it.
"""
import asyncio
import logging
import threading
from collections import defaultdict
from typing import Any

from starlette.requests import HTTPConnection

logger = logging.getLogger(__name__)

ADMIN_ROOM = "admin"

ORDER_NOTIFICATION = "order-notification"
STOCK_UPDATE = "stock-update"


class Subscriber:
    """
    One connected listener.

    Messages are handed over to the listener's own event loop, so
    `deliver` is safe to call from worker threads (sync routes).
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self.loop = loop or asyncio.get_running_loop()
        self.queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()

    def deliver(self, message: dict[str, Any]) -> None:
        self.loop.call_soon_threadsafe(self.queue.put_nowait, message)

    async def next_message(self) -> dict[str, Any]:
        return await self.queue.get()


class NotificationHub:
    """
    Room-based fan-out of events to connected subscribers.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._rooms: dict[str, set[Subscriber]] = defaultdict(set)

    def join(self, room: str, subscriber: Subscriber) -> None:
        with self._lock:
            self._rooms[room].add(subscriber)

    def leave(self, room: str, subscriber: Subscriber) -> None:
        with self._lock:
            members = self._rooms.get(room)
            if members is None:
                return
            members.discard(subscriber)
            if not members:
                del self._rooms[room]

    def disconnect(self, subscriber: Subscriber) -> None:
        """Remove a subscriber from every room it joined."""
        with self._lock:
            for room in list(self._rooms):
                self._rooms[room].discard(subscriber)
                if not self._rooms[room]:
                    del self._rooms[room]

    def room_size(self, room: str) -> int:
        with self._lock:
            return len(self._rooms.get(room, ()))

    def publish(self, room: str, event: str, data: dict[str, Any]) -> int:
        """
        Fire-and-forget broadcast of `event` to everyone in `room`.

        Returns the number of subscribers the message was handed to.
        """
        with self._lock:
            members = list(self._rooms.get(room, ()))

        message = {"event": event, "data": data}
        delivered = 0
        for subscriber in members:
            try:
                subscriber.deliver(message)
                delivered += 1
            except RuntimeError:
                # Event loop of that listener is gone
                logger.warning("Dropping dead subscriber from room %s", room)
                self.disconnect(subscriber)

        logger.debug("Published %s to room %s (%d listeners)", event, room, delivered)
        return delivered


def get_notifier(conn: HTTPConnection) -> NotificationHub:
    """
    FastAPI dependency returning the hub owned by the running application.
    """
    return conn.app.state.notifier
