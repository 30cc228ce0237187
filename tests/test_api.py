"""
Unit tests for the presenter web endpoints.
"""
import socket

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from mdplay.api import create_app
from mdplay.api.routes.presenter import router as presenter_router
from mdplay.core.errors import PresenterError
from mdplay.services.presenter import build_slide_message
from mdplay.services.presenter.server import PresenterServer

from conftest import markdown_slide


@pytest.fixture
def app(clean_environment):
    """Create a test FastAPI application."""
    app = FastAPI()
    app.include_router(presenter_router)
    return app


@pytest.fixture
def client(app):
    """Create a test client."""
    return TestClient(app)


class TestPresenterPage:
    """Tests for the speaker-notes page."""
    
    def test_page(self, client):
        response = client.get("/")
        
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "new WebSocket" in response.text
        assert '"/ws"' in response.text
    
    def test_create_app(self, clean_environment):
        response = TestClient(create_app()).get("/")
        
        assert response.status_code == 200
        assert "mdplay" in response.text


class TestHealthAPI:
    """Tests for the health endpoint."""
    
    def test_health_idle(self, client, presenter_hub):
        response = client.get("/health")
        
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["clients"] == 0
        assert data["started"] is False
        assert data["current_slide"] is None
    
    def test_health_running(self, client, presenter_hub):
        presenter_hub.start()
        presenter_hub.last_message = build_slide_message([markdown_slide("a"), markdown_slide("b")], 1)
        
        data = client.get("/health").json()
        
        assert data["started"] is True
        assert data["current_slide"] == 1


class TestPresenterSocket:
    """Tests for the presenter WebSocket."""
    
    def test_new_client_receives_clock_and_current_slide(self, client, presenter_hub):
        slides = [
            markdown_slide("a", filename="a.md", title="Intro").model_copy(update={"notes": "Say hello"}),
            markdown_slide("b", filename="b.md", title="Outro"),
        ]
        start = presenter_hub.start()
        presenter_hub.broadcast_slide_change(0, slides)
        
        with client.websocket_connect("/ws") as websocket:
            init = websocket.receive_json()
            slide = websocket.receive_json()
            assert len(presenter_hub.active_connections) == 1
        
        assert init == {"type": "init", "startTime": start}
        assert slide == {
            "type": "slide",
            "slideIndex": 0,
            "totalSlides": 2,
            "title": "Intro",
            "notes": "Say hello",
            "nextTitle": "Outro",
        }


class TestPresenterServer:
    def test_port_in_use(self, settings):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as blocker:
            blocker.bind(("127.0.0.1", 0))
            blocker.listen()
            port = blocker.getsockname()[1]
            server = PresenterServer(FastAPI(), settings.model_copy(update={"presenter_port": port}))
            
            with pytest.raises(PresenterError):
                server._bind()
