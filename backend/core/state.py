# backend/core/state.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from core.config import settings
from services.chatroom_store import ChatroomStore
from services.client_registry import ClientRegistry
from services.connection_manager import ConnectionManager
from services.event_pipeline import EventPipeline


class ChatState:
    """
    All mutable server state, owned by one object.

    The app builds one instance at startup and hands it to every
    connection's handlers; tests build their own.
    """

    def __init__(self, default_rooms: Iterable[str] = (), allow_room_creation: bool = True) -> None:
        self.connections = ConnectionManager()
        self.registry = ClientRegistry()
        self.store = ChatroomStore(publisher=self.connections)
        self.pipeline = EventPipeline(self.registry, self.store)
        self.allow_room_creation = allow_room_creation

        for name in default_rooms:
            self.store.create(name)

        # Metrics
        self.message_counter: int = 0
        self.app_start_time: datetime = datetime.now(timezone.utc)


def build_state() -> ChatState:
    return ChatState(
        default_rooms=settings.DEFAULT_ROOMS,
        allow_room_creation=settings.ALLOW_ROOM_CREATION,
    )
