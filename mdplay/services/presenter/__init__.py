"""Speaker-notes broadcast to the browser presenter view."""

from .hub import PresenterHub, build_slide_message, get_presenter_hub

__all__ = [
    "PresenterHub",
    "build_slide_message",
    "get_presenter_hub",
]
