# backend/services/chatroom_store.py

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Dict, Iterator, List, Optional, Set

from core.logging import get_logger
from models.models import ChatEntry, RoomSummary
from services.connection_manager import ConnectionManager
from services.errors import InvalidRequest, RoomAlreadyExists

logger = get_logger(__name__)

# ============================================================================
# CHATROOM
# ============================================================================

class Chatroom:
    """
    A named room with a live member set and an append-only history.

    Attributes:
        name: Unique, case-sensitive room name
        history: Entries in arrival order, never reordered or deleted
        member_ids: Connection ids currently in the room
        lock: Serializes history append + broadcast for this room
    """

    def __init__(self, name: str, publisher: ConnectionManager) -> None:
        self.name = name
        self.created_at = datetime.now(timezone.utc)
        self.history: List[ChatEntry] = []
        self.member_ids: Set[str] = set()
        self.lock = asyncio.Lock()
        self._publisher = publisher

    def add_entry(self, entry: ChatEntry) -> None:
        self.history.append(entry)

    def get_history(self) -> List[ChatEntry]:
        """Return a copy of the full history, oldest first."""
        return list(self.history)

    def add_member(self, connection_id: str) -> None:
        self.member_ids.add(connection_id)

    def remove_member(self, connection_id: str) -> None:
        self.member_ids.discard(connection_id)

    def has_member(self, connection_id: str) -> bool:
        return connection_id in self.member_ids

    def members(self) -> List[str]:
        return list(self.member_ids)

    @property
    def member_count(self) -> int:
        return len(self.member_ids)

    async def broadcast(self, message: dict) -> List[str]:
        """
        Send a message to every current member.

        The member set is copied at call time: connections joining or
        leaving while delivery is in flight neither receive a partial
        message nor get it twice.

        Returns:
            Connection ids the message could not be delivered to.
        """
        recipients = self.members()
        if not recipients:
            logger.debug("[routing] Skipped broadcast: room=%s has 0 members", self.name)
            return []

        logger.debug("📨 Broadcasting to room %s: %d clients", self.name, len(recipients))
        return await self._publisher.broadcast(recipients, message)

    def summary(self) -> RoomSummary:
        return RoomSummary(
            name=self.name,
            member_count=self.member_count,
            history_length=len(self.history),
        )

    def __repr__(self) -> str:
        return f"Chatroom({self.name!r}, members={self.member_count}, history={len(self.history)})"


# ============================================================================
# CHATROOM STORE
# ============================================================================

class ChatroomStore:
    """
    Owns every chatroom for the lifetime of the process.

    Rooms are kept in insertion order, which is also the order
    `list_serialized` reports them in. Nothing is persisted; a restart
    starts again from the configured default rooms.

    Usage:
        store = ChatroomStore(publisher=connection_manager)
        store.create("general")
        store.get_by_name("general").add_member(connection_id)
    """

    def __init__(self, publisher: ConnectionManager) -> None:
        self.rooms: Dict[str, Chatroom] = {}
        self.publisher = publisher

    def get_by_name(self, name: str) -> Optional[Chatroom]:
        return self.rooms.get(name)

    def create(self, name: str) -> Chatroom:
        """
        Create a new empty room.

        Args:
            name: Room name. Surrounding whitespace is stripped; case is kept.

        Returns:
            The new Chatroom

        Raises:
            InvalidRequest: name is blank
            RoomAlreadyExists: a room with this name is already present
        """
        name = (name or "").strip()
        if not name:
            raise InvalidRequest("Room name required")
        if name in self.rooms:
            raise RoomAlreadyExists(name)

        room = Chatroom(name, publisher=self.publisher)
        self.rooms[name] = room
        logger.info("✓ Created room: %s", name)
        return room

    def list_serialized(self, name_filter: Optional[str] = None) -> List[RoomSummary]:
        """
        Summaries of all rooms, optionally limited to an exact name match.
        """
        return [
            room.summary()
            for room in self.rooms.values()
            if not name_filter or room.name == name_filter
        ]

    def rooms_containing(self, connection_id: str) -> List[Chatroom]:
        """
        Rooms where `connection_id` is currently a member.

        Returns a new list, so callers may change membership while
        iterating over it.
        """
        return [room for room in self.rooms.values() if room.has_member(connection_id)]

    def remove_member(self, connection_id: str) -> None:
        """Remove a connection from every room's member set."""
        for room in self.rooms.values():
            room.remove_member(connection_id)

    def active_room_count(self) -> int:
        return sum(1 for room in self.rooms.values() if room.member_ids)

    def __len__(self) -> int:
        return len(self.rooms)

    def __iter__(self) -> Iterator[Chatroom]:
        return iter(list(self.rooms.values()))
