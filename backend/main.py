# backend/main.py

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from core.logging import setup_logging, get_logger
from core.state import ChatState, build_state
from api.routes import root, health, metrics, rooms
from api import websocket as websocket_module

# Configure logging first
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    chat: ChatState = app.state.chat
    logger.info(
        "🚀 Application starting - %d rooms: %s",
        len(chat.store),
        ", ".join(room.name for room in chat.store),
    )
    yield
    logger.info("Application shutdown complete")


def create_app(chat: Optional[ChatState] = None) -> FastAPI:
    """
    Build the FastAPI app around a ChatState.

    Args:
        chat: State to serve. A fresh one built from settings when omitted.
    """
    app = FastAPI(title="Realtime Chatrooms", lifespan=lifespan)
    app.state.chat = chat if chat is not None else build_state()

    # CORS (origins from CORS_ORIGINS)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # REST routes
    app.include_router(root.router)
    app.include_router(health.router)
    app.include_router(metrics.router)
    app.include_router(rooms.router)

    # WebSocket routes
    app.include_router(websocket_module.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT)

# ============================================================================
# END OF FILE
# ============================================================================
