# backend/api/routes/utils.py

from __future__ import annotations

from fastapi import Request

from core.state import ChatState


def get_chat(request: Request) -> ChatState:
    """
    Dependency returning the app's ChatState.

    Usage:
        @router.get("/rooms")
        async def list_rooms(chat: ChatState = Depends(get_chat)): ...
    """
    return request.app.state.chat
