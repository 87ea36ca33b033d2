# backend/services/event_pipeline.py

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from core.logging import get_logger
from models.models import ChatEntry, EntryPayload
from services.chatroom_store import Chatroom, ChatroomStore
from services.client_registry import ClientRegistry
from services.errors import UnknownRoom, UnregisteredActor

logger = get_logger(__name__)


class EventPipeline:
    """
    Records an action in a room's history and fans it out to the members.

    Every room-mutating action (join, leave, message, disconnect cleanup)
    goes through `handle_event`:

        1. Resolve the room and the acting client. Both must exist before
           anything is changed.
        2. Build a ChatEntry stamped with the actor's current name and the
           UTC time.
        3. Append it to the room's history.
        4. Broadcast it to the room's current members.
        5. Return the room so the caller can adjust membership.

    Steps 3 and 4 run under the room's lock, so members only ever see
    broadcasts for entries already in history, and in history order.
    """

    def __init__(self, registry: ClientRegistry, store: ChatroomStore) -> None:
        self.registry = registry
        self.store = store

    def ensure_valid_chatroom(self, room_name: str) -> Chatroom:
        room = self.store.get_by_name(room_name)
        if room is None:
            raise UnknownRoom(room_name)
        return room

    def ensure_user(self, connection_id: str) -> str:
        user_name = self.registry.get_name_by_connection_id(connection_id)
        if user_name is None:
            raise UnregisteredActor()
        return user_name

    async def handle_event(
        self,
        connection_id: str,
        room_name: str,
        build_payload: Callable[[], EntryPayload],
    ) -> Chatroom:
        """
        Validate, record and broadcast one room event.

        Args:
            connection_id: The acting connection
            room_name: Target room
            build_payload: Called once validation passed; returns the
                           EventPayload or MessagePayload for the entry

        Returns:
            The Chatroom the entry was recorded in

        Raises:
            UnknownRoom: no room named `room_name`
            UnregisteredActor: the connection has no registered username
        """
        room = self.ensure_valid_chatroom(room_name)
        user_name = self.ensure_user(connection_id)

        payload = build_payload()

        async with room.lock:
            # Timestamp order matches history order
            entry = ChatEntry(
                client_id=connection_id,
                user_name=user_name,
                timestamp=datetime.now(timezone.utc),
                payload=payload,
            )
            room.add_entry(entry)
            await room.broadcast({"type": "chat_entry", **entry.to_wire(room.name)})

        logger.debug("Recorded %s entry from %s in %s", entry.payload.kind, user_name, room.name)
        return room
