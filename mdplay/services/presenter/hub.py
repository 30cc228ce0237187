"""
Presenter broadcast hub.

Keeps the browser connections of the presenter view and pushes a message
to all of them whenever the active slide changes. Broadcasting never blocks
navigation: sends are scheduled as tasks and failures only drop the client.
"""
import asyncio
import logging
import time
from functools import lru_cache
from typing import Optional, Sequence, Union

from fastapi import WebSocket
from pydantic import BaseModel
from starlette.websockets import WebSocketState

from mdplay.models.presenter import InitMessage, SlideMessage
from mdplay.models.slide import CastSlide, MarkdownSlide

logger = logging.getLogger(__name__)

AnySlide = Union[MarkdownSlide, CastSlide]


def build_slide_message(slides: Sequence[AnySlide], index: int) -> SlideMessage:
    """Describe the slide at ``index`` and the title of the one after it."""
    current = slides[index] if 0 <= index < len(slides) else None
    upcoming = slides[index + 1] if 0 <= index + 1 < len(slides) else None
    return SlideMessage(
        slide_index=index,
        total_slides=len(slides),
        title=current.title if current else "",
        notes=current.notes if current else "",
        next_title=upcoming.title if upcoming else None,
    )


class PresenterHub:
    """Connected presenter clients and the presentation clock."""

    def __init__(self):
        self.active_connections: set[WebSocket] = set()
        self.start_time: Optional[int] = None
        self.last_message: Optional[SlideMessage] = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def started(self) -> bool:
        return self.start_time is not None

    def start(self) -> int:
        """Record the presentation start time (epoch milliseconds)."""
        self.start_time = int(time.time() * 1000)
        return self.start_time

    async def connect(self, websocket: WebSocket) -> None:
        """Accept a client and bring it up to date."""
        await websocket.accept()
        self.active_connections.add(websocket)
        logger.info(f"🖥️ Presenter client connected ({len(self.active_connections)} total)")

        if self.start_time is not None:
            await self._send(websocket, InitMessage(start_time=self.start_time))
        if self.last_message is not None:
            await self._send(websocket, self.last_message)

    def disconnect(self, websocket: WebSocket) -> None:
        self.active_connections.discard(websocket)
        logger.info(f"Presenter client disconnected ({len(self.active_connections)} left)")

    @staticmethod
    def _encode(message: BaseModel) -> str:
        return message.model_dump_json(by_alias=True)

    async def _send(self, websocket: WebSocket, message: BaseModel) -> None:
        if websocket.client_state == WebSocketState.CONNECTED:
            await websocket.send_text(self._encode(message))

    async def publish(self, message: BaseModel) -> None:
        """Send a message to every client, dropping the ones that fail."""
        text = self._encode(message)
        stale = set()
        for websocket in self.active_connections.copy():
            try:
                if websocket.client_state == WebSocketState.CONNECTED:
                    await websocket.send_text(text)
                else:
                    stale.add(websocket)
            except Exception as e:
                logger.warning(f"Failed to send to presenter client: {e}")
                stale.add(websocket)

        for websocket in stale:
            self.disconnect(websocket)

    def broadcast_slide_change(self, index: int, slides: Sequence[AnySlide]) -> None:
        """Fire-and-forget notification of the new active slide."""
        message = build_slide_message(slides, index)
        self.last_message = message
        if not self.active_connections:
            return

        task = asyncio.get_running_loop().create_task(self.publish(message))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait for scheduled broadcasts to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def reset(self) -> None:
        """Forget clients, clock and last slide."""
        self.active_connections.clear()
        self.start_time = None
        self.last_message = None


@lru_cache()
def get_presenter_hub() -> PresenterHub:
    """Get the process-wide presenter hub."""
    return PresenterHub()
