"""Presenter view endpoints."""
import logging
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from mdplay.core import get_debug_status, get_settings
from mdplay.services.presenter import get_presenter_hub

logger = logging.getLogger(__name__)
router = APIRouter()

templates = Jinja2Templates(directory=Path(__file__).parent.parent.parent / "web" / "templates")


@router.get("/", response_class=HTMLResponse)
async def presenter_page(request: Request):
    """Serve the speaker-notes page."""
    settings = get_settings()
    return templates.TemplateResponse(
        request,
        "presenter.html",
        {
            "app_name": settings.app_name,
            "ws_path": "/ws",
        },
    )


@router.websocket("/ws")
async def presenter_socket(websocket: WebSocket):
    """
    Push channel for slide changes.

    Inbound messages are read only to notice the client going away.
    """
    hub = get_presenter_hub()
    await hub.connect(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        hub.disconnect(websocket)


@router.get("/health")
async def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    settings = get_settings()
    hub = get_presenter_hub()
    debug_status = get_debug_status()

    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "clients": len(hub.active_connections),
        "started": hub.started,
        "current_slide": hub.last_message.slide_index if hub.last_message else None,
        "debug_mode": debug_status["debug_mode"],
        "reload_count": debug_status["reload_count"],
    }
