# storefront/routers/notifications.py
import asyncio
import json
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from storefront.core.notifications import NotificationHub, Subscriber, get_notifier

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notifications"])


async def _pump(websocket: WebSocket, subscriber: Subscriber) -> None:
    while True:
        message = await subscriber.next_message()
        await websocket.send_json(message)


@router.websocket("/ws")
async def notifications_socket(
    websocket: WebSocket,
    notifier: NotificationHub = Depends(get_notifier),
):
    """
    Push channel.

    Client frames:
        {"action": "join", "room": "<user_id>" | "admin"}
        {"action": "leave", "room": "..."}

    Server frames:
        {"event": "joined" | "left" | "error" | <published event>, "data": {...}}
    """
    await websocket.accept()
    subscriber = Subscriber()
    pump = asyncio.create_task(_pump(websocket, subscriber))

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                frame = json.loads(raw)
            except json.JSONDecodeError:
                frame = None

            if not isinstance(frame, dict) or not isinstance(frame.get("room"), str):
                subscriber.deliver(
                    {"event": "error", "data": {"message": "Expected {action, room}"}}
                )
                continue

            room = frame["room"]
            action = frame.get("action")
            if action == "join":
                notifier.join(room, subscriber)
                subscriber.deliver({"event": "joined", "data": {"room": room}})
            elif action == "leave":
                notifier.leave(room, subscriber)
                subscriber.deliver({"event": "left", "data": {"room": room}})
            else:
                subscriber.deliver(
                    {"event": "error", "data": {"message": f"Unknown action {action}"}}
                )
    except WebSocketDisconnect:
        logger.debug("Notification socket closed")
    finally:
        notifier.disconnect(subscriber)
        pump.cancel()
