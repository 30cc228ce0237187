"""
Tests for the interactive session, driven through a fake terminal.
"""
import asyncio
import os
from unittest.mock import MagicMock

import pytest

from mdplay.models.navigation import Mode, PlayAction, QuitAction
from mdplay.services.rendering.ansi import strip_ansi
from mdplay.services.slides import load_slides, resolve_source
from mdplay.ui.session import PresentationSession

from conftest import markdown_slide


class FakeTerminal:
    """Records drawn screens; input comes from a pipe."""
    
    def __init__(self, columns: int = 100, rows: int = 30):
        self.columns = columns
        self.rows = rows
        self.screens: list[list[str]] = []
        self.fd, self.write_fd = os.pipe()
    
    def __enter__(self):
        return self
    
    def __exit__(self, exc_type, exc, tb):
        os.close(self.write_fd)
        os.close(self.fd)
    
    def size(self):
        return self.columns, self.rows
    
    def read(self) -> bytes:
        return os.read(self.fd, 1024)
    
    def draw(self, lines):
        self.screens.append(lines)
    
    @property
    def text(self) -> str:
        return strip_ansi("\n".join(self.screens[-1]))


@pytest.fixture
def deck(slides_dir, settings):
    source = resolve_source(str(slides_dir), settings)
    return source, load_slides(source)


@pytest.fixture
def session(deck, settings):
    source, slides = deck
    return PresentationSession(
        slides,
        source,
        settings,
        on_slide_change=MagicMock(),
        terminal=FakeTerminal(),
        watch=False,
    )


class TestPresentationSession:
    """Tests for key handling and drawing."""
    
    @pytest.mark.asyncio
    async def test_loading_then_content(self, session):
        session.repaint()
        assert "Loading…" in session.terminal.text
        
        await session._pipeline.drain()
        
        assert "First" in session.terminal.text
        assert "Second" not in session.terminal.text
    
    @pytest.mark.asyncio
    async def test_fragment_reveal_and_slide_change(self, session):
        session.repaint()
        await session._pipeline.drain()
        
        session.press("right")
        await session._pipeline.drain()
        assert "Second" in session.terminal.text
        assert "Step 2/2" in session.terminal.text
        session._on_slide_change.assert_not_called()
        
        session.press("right")
        assert session.state.index == 1
        assert "PRESS [SPACE] TO PLAY RECORDING" in session.terminal.text
        session._on_slide_change.assert_called_once_with(1, session.slides)
    
    @pytest.mark.asyncio
    async def test_overview(self, session):
        session.press("tab")
        
        assert session.state.mode == Mode.OVERVIEW
        assert "Overview" in session.terminal.text
        assert "[DEMO]" in session.terminal.text
    
    @pytest.mark.asyncio
    async def test_theme_selector(self, session):
        session.press("t")
        
        assert "Select theme" in session.terminal.text
        assert "Retro Amber" in session.terminal.text
    
    @pytest.mark.asyncio
    async def test_reload_clamps_index(self, session):
        session.press("right")
        session.press("right")
        
        session.replace_slides([markdown_slide("only", filename="only.md")])
        
        assert session.state.index == 0
        assert session.reload_count == 1
        assert "●" in session.terminal.text
    
    @pytest.mark.asyncio
    async def test_reload_to_empty_deck(self, session):
        session.replace_slides([])
        
        assert "No slides found" in session.terminal.text
    
    @pytest.mark.asyncio
    async def test_run_until_quit(self, session):
        task = asyncio.get_running_loop().create_task(session.run())
        await asyncio.sleep(0.01)
        
        os.write(session.terminal.write_fd, b"q")
        action = await asyncio.wait_for(task, timeout=1)
        
        assert isinstance(action, QuitAction)
        session._on_slide_change.assert_called_with(0, session.slides)
    
    @pytest.mark.asyncio
    async def test_run_until_play(self, session):
        task = asyncio.get_running_loop().create_task(session.run())
        await asyncio.sleep(0.01)
        
        os.write(session.terminal.write_fd, b"\x1b[C\x1b[C ")
        action = await asyncio.wait_for(task, timeout=1)
        
        assert isinstance(action, PlayAction)
        assert action.slide_index == 1
        assert action.path.name == "02_demo.cast"
