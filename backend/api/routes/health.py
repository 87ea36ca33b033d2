# backend/api/routes/health.py

from fastapi import APIRouter, Depends

from api.routes.utils import get_chat
from core.state import ChatState

router = APIRouter()

@router.get("/health")
async def health(chat: ChatState = Depends(get_chat)):
    """
    Health check endpoint.

    Returns current system status, connection counts, and room counts.

    Returns:
        dict: Status, connection count, registered clients, room count, active room count
    """
    return {
        "status": "healthy",
        "connections": len(chat.connections),
        "registered_clients": len(chat.registry),
        "rooms": len(chat.store),
        "active_rooms_with_members": chat.store.active_room_count(),
    }
