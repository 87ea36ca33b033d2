# backend/api/routes/metrics.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from api.routes.utils import get_chat
from core.state import ChatState

router = APIRouter()

@router.get("/metrics")
async def get_metrics(chat: ChatState = Depends(get_chat)):
    """
    Usage metrics endpoint.

    Returns:
        dict: Message statistics (total, per second, daily projection),
              uptime, and capacity (connections, clients, rooms)

    Example Response:
        {
            "total_messages": 1200,
            "uptime_hours": 5.5,
            "messages_per_second": 0.06,
            "daily_messages_projected": 5236,
            "concurrent_connections": 12,
            "registered_clients": 10,
            "total_rooms": 3,
            "active_rooms_with_members": 2
        }
    """
    uptime_seconds = (datetime.now(timezone.utc) - chat.app_start_time).total_seconds()

    if uptime_seconds > 0:
        messages_per_second = chat.message_counter / uptime_seconds
        daily_messages = int(messages_per_second * 86400)
    else:
        messages_per_second = 0
        daily_messages = 0

    return {
        # Statistics
        "total_messages": chat.message_counter,
        "uptime_hours": round(uptime_seconds / 3600, 2) if uptime_seconds > 0 else 0,
        "messages_per_second": round(messages_per_second, 2),
        "daily_messages_projected": daily_messages,

        # Capacity
        "concurrent_connections": len(chat.connections),
        "registered_clients": len(chat.registry),
        "total_rooms": len(chat.store),
        "active_rooms_with_members": chat.store.active_room_count(),
    }
