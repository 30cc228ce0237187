"""
Pytest configuration and fixtures.
"""
import json
from pathlib import Path
from typing import Optional

import pytest

from mdplay.core.config import Settings, get_settings
from mdplay.models.slide import CastSlide, MarkdownSlide, SlideMetadata
from mdplay.services.presenter import get_presenter_hub

CAST_HEADER_V2 = {"version": 2, "width": 80, "height": 24, "timestamp": 1700000000}
CAST_HEADER_V3 = {"version": 3, "term": {"cols": 80, "rows": 24, "type": "xterm-256color"}}


def write_cast(path: Path, header: dict, events: list = ()) -> Path:
    """Write a minimal asciinema recording."""
    lines = [json.dumps(header)] + [json.dumps(event) for event in events]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def markdown_slide(content: str, filename: str = "slide.md", title: str = "slide", metadata: Optional[dict] = None) -> MarkdownSlide:
    """Build a Markdown slide without touching the filesystem."""
    return MarkdownSlide(
        title=title,
        filename=filename,
        metadata=SlideMetadata(**(metadata or {})),
        content=content,
        slide_dir=Path("/tmp"),
    )


def cast_slide(filename: str = "demo.cast", path: Path = Path("/tmp/demo.cast")) -> CastSlide:
    return CastSlide(title=filename.rsplit(".", 1)[0], filename=filename, path=path)


@pytest.fixture
def clean_environment(monkeypatch):
    """Provide a clean environment for tests."""
    import os

    for var in list(os.environ):
        if var.startswith("MDPLAY_"):
            monkeypatch.delenv(var, raising=False)
    monkeypatch.delenv("DEBUG", raising=False)
    monkeypatch.delenv("COLORTERM", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings(tmp_path, clean_environment):
    """Settings that never read a stray .env file and log into tmp_path."""
    return Settings(_env_file=None, log_file=tmp_path / "mdplay.log")


@pytest.fixture
def slides_dir(tmp_path):
    """A small deck: a Markdown slide with fragments and a recording."""
    deck = tmp_path / "deck"
    deck.mkdir()
    (deck / "01_intro.md").write_text(
        "# Welcome\n\nFirst\n\n<!-- fragment -->\n\nSecond\n\n<!-- notes: Say hello -->\n",
        encoding="utf-8",
    )
    write_cast(deck / "02_demo.cast", CAST_HEADER_V2, [[0.1, "o", "hello world\r\n"]])
    return deck


@pytest.fixture
def presenter_hub():
    """Fresh process-wide presenter hub."""
    get_presenter_hub.cache_clear()
    hub = get_presenter_hub()
    yield hub
    hub.reset()
    get_presenter_hub.cache_clear()
