# backend/api/routes/root.py

from fastapi import APIRouter

router = APIRouter()


@router.get("/")
async def root():
    """
    Root endpoint - API information.

    Returns basic info about the API and its features.
    """
    return {
        "message": "Realtime Chatrooms",
        "version": "1.0",
        "features": ["usernames", "rooms", "room_history", "broadcast", "room_creation"],
        "endpoints": {
            "websocket": "/ws",
            "rooms": "/rooms",
            "health": "/health",
            "metrics": "/metrics",
        },
    }
