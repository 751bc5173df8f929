"""FastAPI application for the Lightduel game server."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lightduel import __version__
from lightduel.api.routers import sessions_router, websocket_router
from lightduel.config import get_config
from lightduel.simulation import get_session_manager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    config = get_config()
    for error in config.validate():
        logger.warning(f"Config: {error}")
    if not config.tuning_enabled:
        logger.info("GEMINI_API_KEY not set; opponent tuning is disabled")

    logger.info("Lightduel API starting up...")
    yield
    logger.info("Lightduel API shutting down...")

    # Cancel every frame loop
    await get_session_manager().cleanup_all()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Lightduel API",
        description="Player vs. AI light-cycle duel",
        version=__version__,
        lifespan=lifespan,
    )

    # Configure CORS for frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://localhost:5173",  # Vite dev server
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(sessions_router, prefix="/api/v1")
    app.include_router(websocket_router)

    @app.get("/")
    async def root() -> dict:
        """Root endpoint - API info."""
        return {
            "name": "Lightduel API",
            "version": __version__,
            "description": "Player vs. AI light-cycle duel",
            "docs": "/docs",
        }

    @app.get("/health")
    async def health() -> dict:
        """Health check endpoint."""
        return {
            "status": "healthy",
            "active_sessions": len(get_session_manager().active_sessions),
            "tuning_enabled": get_config().tuning_enabled,
        }

    return app


# Create app instance
app = create_app()


def run_api(host: str = "127.0.0.1", port: int = 8000, reload: bool = False) -> None:
    """Run the API server."""
    config = get_config()
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "lightduel.api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    run_api(reload=True)
