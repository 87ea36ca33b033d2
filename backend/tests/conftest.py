"""Shared test fixtures for the chatroom backend."""
import pytest
from fastapi.testclient import TestClient

from api.handlers import ConnectionHandlers
from core.state import ChatState
from main import create_app


class FakeConnection:
    """In-memory stand-in for a WebSocket connection.

    Records every payload sent to it; with fail=True every send raises,
    like a socket that went away without closing cleanly.
    """

    def __init__(self, connection_id: str, fail: bool = False):
        self.id = connection_id
        self.fail = fail
        self.sent = []

    async def send_json(self, data: dict) -> None:
        if self.fail:
            raise RuntimeError("connection closed")
        self.sent.append(data)

    def entries(self):
        """Only the chat_entry pushes, in arrival order."""
        return [m for m in self.sent if m.get("type") == "chat_entry"]


@pytest.fixture
def chat():
    """A fresh ChatState with two default rooms."""
    return ChatState(default_rooms=["general", "random"])


@pytest.fixture
def connect(chat):
    """Factory opening a fake connection; returns (connection, handlers)."""

    def _connect(connection_id: str, fail: bool = False):
        connection = FakeConnection(connection_id, fail=fail)
        chat.connections.add(connection)
        return connection, ConnectionHandlers(connection_id, chat)

    return _connect


@pytest.fixture
def api_client(chat):
    """TestClient for an app serving the `chat` fixture's state.

    Entered as a context manager so every websocket session shares one
    event loop, like connections on a single server process.
    """
    with TestClient(create_app(chat)) as client:
        yield client
