# backend/api/handlers.py

from __future__ import annotations

from typing import Dict, List, Optional

from core.logging import get_logger
from core.state import ChatState
from models.models import ChatEntry, EventPayload, MessagePayload, RoomSummary
from services.errors import InvalidRequest, NameUnavailable

logger = get_logger(__name__)


async def broadcast_room_list_update(chat: ChatState) -> None:
    """
    Notify every live connection that the room list has changed.

    Sends:
        {"type": "rooms_updated", "rooms": [list of room summaries]}
    """
    rooms_data = [r.model_dump() for r in chat.store.list_serialized()]
    await chat.connections.broadcast_all({"type": "rooms_updated", "rooms": rooms_data})


# ============================================================================
# CONNECTION HANDLERS
# ============================================================================

class ConnectionHandlers:
    """
    The actions one connection can perform, bound to its connection id.

    Each method either returns its result or raises a ChatError subclass;
    the transport turns those into response frames. Errors only ever reach
    the connection that caused them.
    """

    def __init__(self, connection_id: str, chat: ChatState) -> None:
        self.connection_id = connection_id
        self.chat = chat

    async def register(self, user_name: str) -> Dict[str, str]:
        """
        Claim a username for this connection.

        The availability check and the bind happen under the registry lock,
        so two connections racing for the same name can't both win.

        Raises:
            InvalidRequest: blank username
            NameUnavailable: another connection holds the name
        """
        user_name = (user_name or "").strip()
        if not user_name:
            raise InvalidRequest("Username required")

        registry = self.chat.registry
        async with registry.lock:
            if not registry.is_name_available(user_name, exclude=self.connection_id):
                raise NameUnavailable(user_name)
            registry.register(self.connection_id, user_name)

        return {"client_id": self.connection_id, "user_name": user_name}

    async def join(self, room_name: str) -> List[ChatEntry]:
        """
        Join a room and get its full history.

        The "joined" entry is broadcast before this connection becomes a
        member, so the joiner sees it in the returned history rather than
        as a push.
        """
        room = await self.chat.pipeline.handle_event(
            self.connection_id,
            room_name,
            lambda: EventPayload(event=f"joined {room_name}"),
        )
        room.add_member(self.connection_id)
        logger.info("→ %s joined '%s' (%s members)", self.connection_id, room.name, room.member_count)
        return room.get_history()

    async def leave(self, room_name: str) -> None:
        # Leaving a room that was never joined still records the event.
        room = await self.chat.pipeline.handle_event(
            self.connection_id,
            room_name,
            lambda: EventPayload(event=f"left {room_name}"),
        )
        room.remove_member(self.connection_id)
        logger.info("← %s left '%s' (%s members)", self.connection_id, room.name, room.member_count)

    async def send_message(self, room_name: str, text: str) -> None:
        await self.chat.pipeline.handle_event(
            self.connection_id,
            room_name,
            lambda: MessagePayload(message=text),
        )
        self.chat.message_counter += 1

    def list_rooms(self, name_filter: Optional[str] = None) -> List[RoomSummary]:
        return self.chat.store.list_serialized(name_filter)

    async def create_room(self, room_name: str) -> RoomSummary:
        """
        Create a new room on behalf of a registered client.

        Raises:
            InvalidRequest: room creation is disabled, or the name is blank
            UnregisteredActor: this connection has no username
            RoomAlreadyExists: the name is taken
        """
        if not self.chat.allow_room_creation:
            raise InvalidRequest("Room creation disabled")
        self.chat.pipeline.ensure_user(self.connection_id)

        room = self.chat.store.create(room_name)
        await broadcast_room_list_update(self.chat)
        return room.summary()

    async def disconnect(self) -> None:
        """
        Tear down everything this connection owns.

        Stops delivery to the connection, sends a "left" event to every room
        it was in, then drops it from all member sets and the registry. A failure
        in one room never stops the others, and the member sets and registry
        are cleared even if the teardown is cancelled part way. Safe to call
        more than once and for connections that never registered.
        """
        # The socket is already gone; stop delivering to it first.
        self.chat.connections.disconnect(self.connection_id)

        try:
            for room in self.chat.store.rooms_containing(self.connection_id):
                try:
                    await self.chat.pipeline.handle_event(
                        self.connection_id,
                        room.name,
                        lambda name=room.name: EventPayload(event=f"left {name}"),
                    )
                except Exception:
                    logger.exception(
                        "Leave event for %s in '%s' failed during disconnect", self.connection_id, room.name
                    )
        finally:
            self.chat.store.remove_member(self.connection_id)
            self.chat.registry.remove(self.connection_id)
