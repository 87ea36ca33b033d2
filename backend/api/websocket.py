# backend/api/websocket.py

from __future__ import annotations

import json
import logging

import anyio
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from api.handlers import ConnectionHandlers
from core.state import ChatState
from services.errors import ChatError, InvalidRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def _require(message: dict, field: str) -> str:
    value = message.get(field)
    if not isinstance(value, str):
        raise InvalidRequest(f"Missing field: {field}")
    return value


async def dispatch(handlers: ConnectionHandlers, message: dict) -> dict:
    """
    Run one client action and build the response frame for it.

    Args:
        handlers: The sending connection's handlers
        message: Decoded client frame, e.g. {"action": "join", "room": "general"}

    Returns:
        The response frame. Rejected actions produce
        {"type": "error", "action": ..., "message": ...}.
        A "request_id" on the request is echoed back unchanged.
    """
    action = message.get("action")

    try:
        if action == "register":
            identity = await handlers.register(_require(message, "user_name"))
            response = {"type": "registered", **identity}

        elif action == "join":
            room = _require(message, "room")
            history = await handlers.join(room)
            response = {
                "type": "room_joined",
                "room": room,
                "history": [entry.to_wire() for entry in history],
            }

        elif action == "leave":
            room = _require(message, "room")
            await handlers.leave(room)
            response = {"type": "room_left", "room": room}

        elif action == "message":
            room = _require(message, "room")
            await handlers.send_message(room, _require(message, "message"))
            response = {"type": "message_sent", "room": room}

        elif action == "list_rooms":
            rooms = handlers.list_rooms(message.get("name_filter"))
            response = {"type": "rooms_list", "rooms": [r.model_dump() for r in rooms]}

        elif action == "create_room":
            summary = await handlers.create_room(_require(message, "room"))
            response = {"type": "room_created", "room": summary.model_dump()}

        else:
            response = {"type": "error", "action": action, "message": f"Unknown action: {action}"}

    except ChatError as e:
        logger.info("Rejected %s from %s: %s", action, handlers.connection_id, e.message)
        response = {"type": "error", "action": action, "message": e.message}

    if "request_id" in message:
        response["request_id"] = message["request_id"]
    return response


# ============================================================================
# WEBSOCKET ENDPOINT
# ============================================================================

@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for real-time chat.

    Protocol:
    =========

    Client -> Server Actions:
    -------------------------
    Register:
        {"action": "register", "user_name": "alice"}
        Response: {"type": "registered", "client_id": "...", "user_name": "alice"}

    Join Room:
        {"action": "join", "room": "general"}
        Response: {"type": "room_joined", "room": "general", "history": [...]}

    Leave Room:
        {"action": "leave", "room": "general"}
        Response: {"type": "room_left", "room": "general"}

    Send Message:
        {"action": "message", "room": "general", "message": "Hello!"}
        Response: {"type": "message_sent", "room": "general"}

    List Rooms:
        {"action": "list_rooms", "name_filter": "general"}   (filter optional)
        Response: {"type": "rooms_list", "rooms": [{"name", "member_count", "history_length"}]}

    Create Room:
        {"action": "create_room", "room": "random"}
        Response: {"type": "room_created", "room": {...}}

    Any action may carry a "request_id", echoed on its response.

    Server -> Client Messages:
    -------------------------
    Room Entry (to room members):
        {"type": "chat_entry", "room": "general", "client_id": "...",
         "user_name": "alice", "timestamp": "...", "message": "Hello!"}
        ("event": "joined general" instead of "message" for join/leave)

    Room List Updated:
        {"type": "rooms_updated", "rooms": [...]}

    Error:
        {"type": "error", "action": "join", "message": "..."}

    Lifecycle:
    ==========
    1. Connection accepted and given a server-generated client id
    2. Client registers a username
    3. Client joins rooms, sends messages
    4. On disconnect, a "left" event goes to every room it was in and all
       its state is dropped
    """
    chat: ChatState = websocket.app.state.chat
    connection = await chat.connections.connect(websocket)
    handlers = ConnectionHandlers(connection.id, chat)

    try:
        while True:
            data = await websocket.receive_text()

            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                await websocket.send_json({"type": "error", "message": "Invalid JSON"})
                continue

            if not isinstance(message, dict):
                await websocket.send_json({"type": "error", "message": "Invalid JSON"})
                continue

            logger.debug("Websocket input from %s: %s", connection.id, message.get("action"))
            await websocket.send_json(await dispatch(handlers, message))

    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.error("WebSocket error: %s", e)
    finally:
        # Closing the socket cancels this task; teardown still has to finish.
        with anyio.CancelScope(shield=True):
            await handlers.disconnect()
