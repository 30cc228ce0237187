"""Service layer for mdplay."""

from .slides import SlideSource, SourceKind, resolve_source, validate_source, load_slides
from .presenter import PresenterHub, get_presenter_hub

__all__ = [
    "SlideSource",
    "SourceKind",
    "resolve_source",
    "validate_source",
    "load_slides",
    "PresenterHub",
    "get_presenter_hub",
]
