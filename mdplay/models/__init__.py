"""Pydantic models and state types for type-safe data handling."""

from .slide import SlideId, SlideMetadata, MarkdownSlide, CastSlide, Slide, ImageRef
from .navigation import Mode, NavigationState, QuitAction, PlayAction, ExitAction, Transition
from .presenter import SlideMessage, InitMessage

__all__ = [
    # Slide models
    "SlideId",
    "SlideMetadata",
    "MarkdownSlide",
    "CastSlide",
    "Slide",
    "ImageRef",
    # Navigation
    "Mode",
    "NavigationState",
    "QuitAction",
    "PlayAction",
    "ExitAction",
    "Transition",
    # Presenter
    "SlideMessage",
    "InitMessage",
]
