# backend/models/models.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class EventPayload(BaseModel):
    """Structural event such as "joined general" or "left general"."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["event"] = "event"
    event: str


class MessagePayload(BaseModel):
    """Free-text message typed by a user."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["message"] = "message"
    message: str


EntryPayload = Annotated[Union[EventPayload, MessagePayload], Field(discriminator="kind")]


class ChatEntry(BaseModel):
    """
    One immutable record in a chatroom's history.

    `user_name` is copied from the registry when the entry is written, so
    later renames or disconnects do not rewrite history.
    """
    model_config = ConfigDict(frozen=True)

    client_id: str
    user_name: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    payload: EntryPayload

    def to_wire(self, room: Optional[str] = None) -> Dict[str, Any]:
        """
        Flatten the entry into the JSON shape sent to clients.

        Exactly one of "event" / "message" is present. "room" is only added
        when given (broadcasts carry it, history listings don't).
        """
        data: Dict[str, Any] = {}
        if room is not None:
            data["room"] = room
        data["client_id"] = self.client_id
        data["user_name"] = self.user_name
        data["timestamp"] = self.timestamp.isoformat()
        if isinstance(self.payload, EventPayload):
            data["event"] = self.payload.event
        else:
            data["message"] = self.payload.message
        return data


class RoomSummary(BaseModel):
    name: str
    member_count: int = 0
    history_length: int = 0


class CreateRoomRequest(BaseModel):
    name: str
