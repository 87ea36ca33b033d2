# backend/services/connection_manager.py

from __future__ import annotations

import asyncio
import uuid
from typing import Dict, Iterable, List, Optional, Protocol

from fastapi import WebSocket

from core.logging import get_logger

logger = get_logger(__name__)


class Connection(Protocol):
    """Anything with a stable id that can be sent a JSON payload."""

    id: str

    async def send_json(self, data: dict) -> None:
        ...


class WebSocketConnection:
    """Binds a FastAPI WebSocket to a server-generated connection id."""

    def __init__(self, websocket: WebSocket, connection_id: Optional[str] = None) -> None:
        self.websocket = websocket
        self.id = connection_id or str(uuid.uuid4())

    async def send_json(self, data: dict) -> None:
        await self.websocket.send_json(data)

    def __repr__(self) -> str:
        return f"WebSocketConnection({self.id!r})"


# ============================================================================
# CONNECTION MANAGER
# ============================================================================

class ConnectionManager:
    """
    Tracks live connections and delivers payloads to them.

    This is the publish primitive the chatrooms broadcast through. It knows
    nothing about rooms or usernames: callers pass the connection ids a
    payload is meant for.

    Data Structures:
        connections: Maps connection_id -> Connection
                     Example: {"c0ffee-...": WebSocketConnection(...)}

    Failure Handling:
        A failed send is logged and reported back to the caller; it never
        stops delivery to the remaining connections. Stale connections are
        torn down by their own receive loop once the socket closes.
    """

    def __init__(self) -> None:
        self.connections: Dict[str, Connection] = {}

    async def connect(self, websocket: WebSocket) -> WebSocketConnection:
        """
        Accept a new WebSocket and start tracking it.

        The connection is anonymous until it registers a username.
        """
        await websocket.accept()
        connection = WebSocketConnection(websocket)
        self.add(connection)
        return connection

    def add(self, connection: Connection) -> None:
        self.connections[connection.id] = connection
        logger.info("✓ Connection %s opened. Total: %d", connection.id, len(self.connections))

    def disconnect(self, connection_id: str) -> None:
        """Stop tracking a connection. No-op if it is already gone."""
        if self.connections.pop(connection_id, None) is not None:
            logger.info("✗ Connection %s closed. Total: %d", connection_id, len(self.connections))

    def get(self, connection_id: str) -> Optional[Connection]:
        return self.connections.get(connection_id)

    async def send(self, connection_id: str, message: dict) -> bool:
        """
        Send a message to one connection.

        Returns:
            True if delivered, False if the connection is unknown or the
            send failed.
        """
        connection = self.connections.get(connection_id)
        if connection is None:
            return False
        try:
            await connection.send_json(message)
            return True
        except Exception as e:
            logger.warning("Send to %s failed: %s", connection_id, e)
            return False

    async def broadcast(self, connection_ids: Iterable[str], message: dict) -> List[str]:
        """
        Deliver a message to every given connection concurrently.

        Args:
            connection_ids: Target ids. Callers pass a snapshot so that
                            membership changes during delivery don't
                            affect who receives this message.
            message: JSON-serializable payload

        Returns:
            Ids whose delivery failed (unknown or send error).

        Returns only after every delivery has been attempted.
        """
        targets = list(connection_ids)
        if not targets:
            return []

        results = await asyncio.gather(
            *[self.send(connection_id, message) for connection_id in targets],
            return_exceptions=True,
        )
        failed = [
            connection_id
            for connection_id, delivered in zip(targets, results)
            if delivered is not True
        ]
        if failed:
            logger.debug("Broadcast missed %d of %d connections", len(failed), len(targets))
        return failed

    async def broadcast_all(self, message: dict) -> List[str]:
        """Deliver a message to every live connection."""
        return await self.broadcast(list(self.connections.keys()), message)

    def __len__(self) -> int:
        return len(self.connections)
