# backend/services/errors.py

from __future__ import annotations


class ChatError(Exception):
    """
    Base exception for rejected chat actions.

    Every subclass is a local, recoverable rejection reported only to the
    connection (or HTTP caller) that made the request. `status_code` is used
    when the error surfaces through a REST route.
    """

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class UnknownRoom(ChatError):
    """Raised when the target chatroom does not exist."""

    def __init__(self, room_name: str):
        self.room_name = room_name
        super().__init__(f"Invalid chatroom name: {room_name}", status_code=404)


class UnregisteredActor(ChatError):
    """Raised when the acting connection has not registered a username."""

    def __init__(self, message: str = "Register username to chat."):
        super().__init__(message, status_code=403)


class NameUnavailable(ChatError):
    """Raised when another connection already holds the requested username."""

    def __init__(self, user_name: str):
        self.user_name = user_name
        super().__init__(f"Username {user_name} not available", status_code=409)


class RoomAlreadyExists(ChatError):
    def __init__(self, room_name: str):
        self.room_name = room_name
        super().__init__(f"Chatroom {room_name} already exists", status_code=409)


class InvalidRequest(ChatError):
    pass
