"""Core configuration module for mdplay."""

from .debug import init_debug_mode, is_debug_mode, get_debug_status, increment_reload_count, get_reload_count
from .config import Settings, get_settings
from .logging import setup_logging
from .errors import MdplayError, SlideSourceError, StartIndexError, PlayerError, CastFormatError, PresenterError

__all__ = [
    "Settings", 
    "get_settings", 
    "setup_logging",
    "init_debug_mode",
    "is_debug_mode",
    "get_debug_status",
    "increment_reload_count",
    "get_reload_count",
    "MdplayError",
    "SlideSourceError",
    "StartIndexError",
    "PlayerError",
    "CastFormatError",
    "PresenterError",
]
