"""
Presenter web application.

Serves the speaker-notes page and the WebSocket it listens on.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from mdplay import __version__
from mdplay.api.routes import presenter
from mdplay.core import get_settings, is_debug_mode
from mdplay.services.presenter import get_presenter_hub

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown."""
    settings = get_settings()

    logger.info(f"🚀 Starting {settings.app_name} presenter on port {settings.presenter_port}")
    if is_debug_mode():
        logger.info("🐛 Debug mode is ACTIVE")

    yield

    # Connections die with the server; keep the hub consistent with that
    get_presenter_hub().active_connections.clear()
    logger.info(f"👋 Shutting down {settings.app_name} presenter...")


def create_app() -> FastAPI:
    """Create and configure the presenter application."""
    settings = get_settings()

    app = FastAPI(
        title=f"{settings.app_name} presenter",
        description="Speaker notes and timer for a running terminal presentation",
        version=__version__,
        lifespan=lifespan,
    )
    app.include_router(presenter.router, tags=["presenter"])
    return app
