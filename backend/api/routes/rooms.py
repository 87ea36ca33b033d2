# backend/api/routes/rooms.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.handlers import broadcast_room_list_update
from api.routes.utils import get_chat
from core.state import ChatState
from models.models import CreateRoomRequest, RoomSummary
from services.errors import ChatError, UnknownRoom

router = APIRouter()

# ============================================================================
# ROOM ENDPOINTS
# ============================================================================

@router.get("/rooms", response_model=List[RoomSummary])
async def list_rooms(
    name: Optional[str] = Query(None, description="Only return the room with this exact name"),
    chat: ChatState = Depends(get_chat),
):
    """
    List rooms in creation order.

    Returns:
        List[RoomSummary]: name, live member count and history length per room
    """
    return chat.store.list_serialized(name)

@router.post("/rooms", response_model=RoomSummary)
async def create_room(request: CreateRoomRequest, chat: ChatState = Depends(get_chat)):
    """
    Create a new chatroom (administrative, no registered client needed).

    Room names are case-sensitive and must be unique.

    Raises:
        HTTPException: 400 if name is blank, 409 if it already exists

    Side Effects:
        - "rooms_updated" message broadcast to all WebSocket clients
    """
    try:
        room = chat.store.create(request.name)
    except ChatError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    await broadcast_room_list_update(chat)
    return room.summary()

@router.get("/rooms/{name}", response_model=RoomSummary)
async def get_room(name: str, chat: ChatState = Depends(get_chat)):
    """
    Raises:
        HTTPException: 404 if room not found
    """
    room = chat.store.get_by_name(name)
    if room is None:
        e = UnknownRoom(name)
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return room.summary()

@router.get("/rooms/{name}/history")
async def get_room_history(name: str, chat: ChatState = Depends(get_chat)):
    """
    Full history of a room, oldest first.

    Returns:
        dict: {"room": name, "history": [entry, ...]}

    Raises:
        HTTPException: 404 if room not found
    """
    room = chat.store.get_by_name(name)
    if room is None:
        e = UnknownRoom(name)
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"room": room.name, "history": [entry.to_wire() for entry in room.get_history()]}
