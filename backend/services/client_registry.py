# backend/services/client_registry.py

from __future__ import annotations

import asyncio
from typing import Dict, Optional

from core.logging import get_logger

logger = get_logger(__name__)

# ============================================================================
# CLIENT REGISTRY
# ============================================================================

class ClientRegistry:
    """
    Maps live connection ids to the display name each one registered.

    Data Structures:
        names: Maps connection_id -> user_name
               Example: {"c0ffee-...": "alice"}

    Concurrency:
        `is_name_available` followed by `register` is a check-then-act
        sequence. Callers that need it to be atomic hold `lock` across
        both calls (see ConnectionHandlers.register).

    Lookups return None for unknown connections; turning that into a
    domain error is the caller's job.
    """

    def __init__(self) -> None:
        self.names: Dict[str, str] = {}
        self.lock = asyncio.Lock()

    def is_name_available(self, user_name: str, exclude: Optional[str] = None) -> bool:
        """
        Check whether no registered connection holds `user_name`.

        Args:
            user_name: Display name to check
            exclude: Connection id whose own binding is ignored, so a
                     connection may re-register under its current name
        """
        return all(
            name != user_name
            for connection_id, name in self.names.items()
            if connection_id != exclude
        )

    def register(self, connection_id: str, user_name: str) -> None:
        """Bind `user_name` to `connection_id`, replacing any previous binding."""
        previous = self.names.get(connection_id)
        self.names[connection_id] = user_name
        if previous and previous != user_name:
            logger.info("✓ Client %s renamed %s -> %s", connection_id, previous, user_name)
        else:
            logger.info("✓ Client %s registered as %s. Total: %d", connection_id, user_name, len(self.names))

    def get_name_by_connection_id(self, connection_id: str) -> Optional[str]:
        return self.names.get(connection_id)

    def remove(self, connection_id: str) -> None:
        user_name = self.names.pop(connection_id, None)
        if user_name is not None:
            logger.info("✗ Client %s (%s) removed. Total: %d", connection_id, user_name, len(self.names))

    def __len__(self) -> int:
        return len(self.names)

    def __contains__(self, connection_id: object) -> bool:
        return connection_id in self.names
