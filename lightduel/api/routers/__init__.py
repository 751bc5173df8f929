"""API routers for game sessions."""

from lightduel.api.routers.sessions import router as sessions_router
from lightduel.api.routers.websocket import router as websocket_router

__all__ = [
    "sessions_router",
    "websocket_router",
]
