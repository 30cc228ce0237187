"""Presenter HTTP/WebSocket server embedded in the presentation's event loop."""
import asyncio
import contextlib
import logging
import socket
from typing import Optional

import uvicorn
from fastapi import FastAPI

from mdplay.core.config import Settings
from mdplay.core.errors import PresenterError

logger = logging.getLogger(__name__)

STARTUP_POLL_SECONDS = 0.05


class _EmbeddedServer(uvicorn.Server):
    """uvicorn server that leaves signal handling to the presentation."""

    @contextlib.contextmanager
    def capture_signals(self):
        yield

    def install_signal_handlers(self) -> None:
        pass


class PresenterServer:
    """
    Serves the presenter app on a background task.

    Args:
        app: FastAPI application to serve
        settings: Provides host and port
    """

    def __init__(self, app: FastAPI, settings: Settings):
        self.app = app
        self.host = settings.presenter_host
        self.port = settings.presenter_port
        self.url = settings.presenter_url
        self._server: Optional[_EmbeddedServer] = None
        self._task: Optional[asyncio.Task] = None

    def _bind(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((self.host, self.port))
        except OSError as e:
            sock.close()
            raise PresenterError(f"Cannot listen on {self.host}:{self.port}: {e}") from e
        return sock

    async def start(self) -> None:
        """
        Start serving and wait until the server accepts connections.

        Raises:
            PresenterError: if the port is unavailable or startup fails
        """
        sock = self._bind()
        config = uvicorn.Config(self.app, log_config=None, access_log=False, lifespan="on")
        self._server = _EmbeddedServer(config)
        self._task = asyncio.get_running_loop().create_task(self._server.serve(sockets=[sock]))

        while not self._server.started:
            if self._task.done():
                error = self._task.exception()
                raise PresenterError(f"Presenter server failed to start: {error or 'stopped'}")
            await asyncio.sleep(STARTUP_POLL_SECONDS)

        logger.info(f"🌐 Presenter server listening on {self.url}")

    async def stop(self) -> None:
        if self._server is None or self._task is None:
            return
        self._server.should_exit = True
        await asyncio.gather(self._task, return_exceptions=True)
        self._server = None
        self._task = None
        logger.info("Presenter server stopped")
