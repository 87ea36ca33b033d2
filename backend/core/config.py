# backend/core/config.py
import os
from typing import List
from dotenv import load_dotenv


def _split(value: str) -> List[str]:
    return list(dict.fromkeys(item.strip() for item in value.split(",") if item.strip()))


class Settings:
    """
    Setup environment variables.
        - DEFAULT_ROOMS comma separated rooms created at startup
        - ALLOW_ROOM_CREATION whether registered clients may create rooms
        - CORS_ORIGINS comma separated allowed origins
        - HOST / PORT where uvicorn listens when run directly
    """

    # Load environment variables from the .env file
    load_dotenv()

    DEFAULT_ROOMS: List[str] = _split(os.getenv("DEFAULT_ROOMS", "general,random"))
    ALLOW_ROOM_CREATION: bool = os.getenv("ALLOW_ROOM_CREATION", "true").lower() == "true"

    CORS_ORIGINS: List[str] = _split(os.getenv("CORS_ORIGINS", "*"))

    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

settings = Settings()
